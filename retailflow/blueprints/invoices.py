"""Sales invoices blueprint."""
from flask import Blueprint, request, jsonify
from retailflow.database import get_session
from retailflow.middleware import json_body
from retailflow.exceptions import ValidationError
from retailflow.services import invoice_service

invoices_bp = Blueprint('invoices', __name__, url_prefix='/api')


@invoices_bp.route('/save-invoice', methods=['POST'])
def save_invoice():
    """
    Save an invoice and its cart items in one transaction.

    Body: {"customer": {"code"}, "invoice": {...}, "cartItems": [...]}
    """
    data = json_body()
    invoice_code = invoice_service.save_invoice(
        get_session(),
        data.get('customer'),
        data.get('invoice'),
        data.get('cartItems'),
    )
    return jsonify({'message': 'Invoice saved successfully!', 'invoiceCode': invoice_code}), 200


@invoices_bp.route('/get-invoices', methods=['GET'])
def list_invoices():
    invoices = invoice_service.list_invoices(get_session())
    return jsonify([invoice.to_dict() for invoice in invoices]), 200


@invoices_bp.route('/get-invoice', methods=['GET'])
def get_invoice():
    code = request.args.get('code')
    if not code:
        raise ValidationError('code is required')
    invoice = invoice_service.get_invoice(get_session(), code)
    return jsonify(invoice.to_dict(include_items=True)), 200
