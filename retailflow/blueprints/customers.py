"""Customers blueprint."""
from flask import Blueprint, jsonify
from retailflow.database import get_session
from retailflow.middleware import json_body
from retailflow.models import Customer
from retailflow.services import party_service

customers_bp = Blueprint('customers', __name__, url_prefix='/api')


@customers_bp.route('/add-customer', methods=['POST'])
def add_customer():
    data = json_body()
    customer = party_service.add_customer(get_session(), data)
    return jsonify({
        'message': 'Customer added successfully',
        'customer': customer.id,
        'code': customer.code,
    }), 200


@customers_bp.route('/get-customers', methods=['GET'])
def list_customers():
    session = get_session()
    customers = session.query(Customer).order_by(Customer.id).all()
    return jsonify([c.to_dict() for c in customers]), 200


@customers_bp.route('/update-customer', methods=['PUT'])
def update_customer():
    data = json_body()
    party_service.update_customer(get_session(), data)
    return jsonify({'message': 'Customer updated successfully.'}), 200


@customers_bp.route('/delete-customer', methods=['POST'])
def delete_customer():
    """Body: {"customers": {"id": ...}}"""
    data = json_body()
    payload = data.get('customers')
    if not isinstance(payload, dict):
        payload = {}
    customer = party_service.delete_customer(get_session(), payload.get('id'))
    return jsonify({'message': f'{customer.name} deleted successfully'}), 200
