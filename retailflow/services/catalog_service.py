"""Catalog service - products with generated SKUs."""
import logging
from typing import Dict, Any

from sqlalchemy.exc import SQLAlchemyError

from retailflow.exceptions import RetailError, ValidationError, NotFoundError, InternalError
from retailflow.models import Product, CodeType
from retailflow.services.code_service import next_code, record_generated
from retailflow.utils.number_format import parse_int, parse_optional_money

logger = logging.getLogger(__name__)


def _parse_product_fields(data: Dict[str, Any], require_quantity: bool) -> Dict[str, Any]:
    """Validate the editable product fields shared by add and update."""
    fields = {}

    quantity = data.get('quantity')
    if quantity is None or quantity == '':
        if require_quantity:
            raise ValidationError('Quantity is required')
    else:
        try:
            fields['quantity'] = parse_int(quantity, 'quantity', minimum=0)
        except ValueError:
            raise ValidationError('Quantity must be a non-negative number')

    try:
        fields['cost'] = parse_optional_money(data.get('cost'), 'cost')
        fields['price'] = parse_optional_money(data.get('price'), 'price')
        max_discount = parse_optional_money(data.get('maxDiscount'), 'maxDiscount')
    except ValueError as e:
        raise ValidationError(str(e))

    if max_discount is not None and max_discount > 100:
        raise ValidationError('maxDiscount must be a non-negative number and in between 0 and 100')
    fields['max_discount'] = max_discount if max_discount is not None else 0

    fields['image'] = data.get('image') or None
    return fields


def add_product(session, data: Dict[str, Any]) -> Product:
    """
    Create a product; its SKU is generated in the same transaction.

    Raises:
        ValidationError: For missing or invalid fields
    """
    if not data.get('name'):
        raise ValidationError('Product name is required')
    if not data.get('category'):
        raise ValidationError('Category is required')

    fields = _parse_product_fields(data, require_quantity=True)

    try:
        sku = next_code(session, CodeType.PRODUCT)
        product = Product(sku=sku, name=data['name'], category=data['category'], **fields)
        session.add(product)
        session.commit()
        record_generated(CodeType.PRODUCT)
        logger.info(f"[CATALOG] Added product {sku} ({product.name})")
        return product

    except RetailError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"[CATALOG] Error adding product: {e}")
        raise InternalError('Error adding product')


def update_product(session, data: Dict[str, Any]) -> Product:
    """Full-row update of a product keyed by SKU."""
    missing = [field for field in ('sku', 'name', 'category') if not data.get(field)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    fields = _parse_product_fields(data, require_quantity=False)

    try:
        product = session.query(Product).filter(Product.sku == data['sku']).first()
        if not product:
            raise NotFoundError('Product not found.')

        product.name = data['name']
        product.category = data['category']
        for key, value in fields.items():
            setattr(product, key, value)

        session.commit()
        return product

    except RetailError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"[CATALOG] Error updating product {data.get('sku')}: {e}")
        raise InternalError('Error updating product')


def delete_product(session, product_id) -> None:
    if not product_id:
        raise ValidationError('Product ID is required')
    product = session.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError('Product not found.')
    session.delete(product)
    session.commit()
    logger.info(f"[CATALOG] Deleted product {product.sku}")
