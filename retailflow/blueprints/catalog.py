"""Catalog blueprint: product categories, products, images and stock."""
from flask import Blueprint, request, jsonify, url_for, current_app
from sqlalchemy.exc import SQLAlchemyError
from retailflow.database import get_session
from retailflow.middleware import json_body
from retailflow.exceptions import ValidationError, NotFoundError, InternalError
from retailflow.models import ProductCategory, Product
from retailflow.services import catalog_service
from retailflow.services.inventory_service import deduct_inventory
from retailflow.services.storage_service import save_upload

catalog_bp = Blueprint('catalog', __name__, url_prefix='/api')


@catalog_bp.route('/create-product-category', methods=['POST'])
def create_category():
    data = json_body()
    name = (data.get('category') or '').strip()
    if not name:
        raise ValidationError('Category is required')

    session = get_session()
    try:
        category = ProductCategory(category=name, status=1)
        session.add(category)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        current_app.logger.exception(f"Error creating category {name}: {e}")
        raise InternalError('Internal server error')

    return jsonify({'message': 'Category created successfully', 'category': category.to_dict()}), 201


@catalog_bp.route('/get-product-categories', methods=['GET'])
def list_categories():
    session = get_session()
    categories = session.query(ProductCategory).order_by(ProductCategory.id).all()
    if not categories:
        raise NotFoundError('No categories found')
    return jsonify({'success': True, 'data': [c.to_dict() for c in categories]}), 200


@catalog_bp.route('/update-product-category', methods=['PUT'])
def update_category():
    data = json_body()
    name = (data.get('category') or '').strip()
    if not name:
        raise ValidationError('Category is required')

    session = get_session()
    category = session.query(ProductCategory).filter_by(id=data.get('id')).first()
    if not category:
        raise NotFoundError('Category not found')

    category.category = name
    session.commit()
    return jsonify({'message': 'Category updated successfully', 'category': category.to_dict()}), 200


@catalog_bp.route('/delete-product-category', methods=['DELETE'])
def delete_category():
    category_id = request.args.get('id', type=int)
    if not category_id:
        raise ValidationError('Category ID is required')

    session = get_session()
    category = session.query(ProductCategory).filter_by(id=category_id).first()
    if not category:
        raise NotFoundError('Category not found')

    session.delete(category)
    session.commit()
    return jsonify({'message': 'Category deleted successfully'}), 200


@catalog_bp.route('/upload-product-image', methods=['POST'])
def upload_product_image():
    """Store the multipart 'image' field and return its public URL."""
    filename = save_upload(request.files.get('image'))
    url = url_for('main.uploaded_file', filename=filename, _external=True)
    return jsonify({'url': url}), 200


@catalog_bp.route('/add-product', methods=['POST'])
def add_product():
    data = json_body()
    product = catalog_service.add_product(get_session(), data)
    return jsonify({'message': 'Product added successfully', 'product': product.to_dict()}), 201


@catalog_bp.route('/get-products', methods=['GET'])
def list_products():
    session = get_session()
    products = session.query(Product).order_by(Product.id).all()
    return jsonify([p.to_dict() for p in products]), 200


@catalog_bp.route('/delete-product', methods=['DELETE'])
def delete_product():
    data = json_body()
    product_id = data.get('id')
    catalog_service.delete_product(get_session(), product_id)
    return jsonify({'message': 'Product deleted successfully', 'id': product_id}), 200


@catalog_bp.route('/update-product', methods=['PUT'])
def update_product():
    data = json_body()
    catalog_service.update_product(get_session(), data)
    return jsonify({'message': 'Product updated successfully.'}), 200


@catalog_bp.route('/auto-update-inventory', methods=['PUT'])
def auto_update_inventory():
    """
    Deduct sold quantities: {"products": [{"sku": ..., "quantity": ...}]}.

    The batch is all or nothing; a 409 names the SKU that could not be deducted.
    """
    data = json_body()
    updated = deduct_inventory(get_session(), data.get('products'))
    return jsonify({'message': 'Products updated successfully.', 'updated': updated}), 200
