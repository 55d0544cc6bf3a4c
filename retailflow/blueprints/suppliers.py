"""Suppliers blueprint."""
from flask import Blueprint, jsonify
from retailflow.database import get_session
from retailflow.middleware import json_body
from retailflow.models import Supplier
from retailflow.services import party_service

suppliers_bp = Blueprint('suppliers', __name__, url_prefix='/api')


@suppliers_bp.route('/add-supplier', methods=['POST'])
def add_supplier():
    data = json_body()
    supplier = party_service.add_supplier(get_session(), data)
    return jsonify({
        'message': 'Supplier added successfully',
        'supplierId': supplier.id,
        'code': supplier.code,
    }), 200


@suppliers_bp.route('/get-suppliers', methods=['GET'])
def list_suppliers():
    session = get_session()
    suppliers = session.query(Supplier).order_by(Supplier.id).all()
    return jsonify([s.to_dict() for s in suppliers]), 200


@suppliers_bp.route('/update-supplier', methods=['PUT'])
def update_supplier():
    data = json_body()
    party_service.update_supplier(get_session(), data)
    return jsonify({'message': 'Supplier updated successfully.'}), 200


@suppliers_bp.route('/delete-supplier', methods=['POST'])
def delete_supplier():
    """Body: {"supplier": {"code": ...}}"""
    data = json_body()
    supplier = data.get('supplier')
    if not isinstance(supplier, dict):
        supplier = {}
    party_service.delete_supplier(get_session(), supplier.get('code'))
    return jsonify({'message': 'Supplier deleted successfully.'}), 200
