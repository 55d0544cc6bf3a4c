"""Purchase orders blueprint."""
from flask import Blueprint, request, jsonify
from retailflow.database import get_session
from retailflow.middleware import json_body
from retailflow.exceptions import NotFoundError
from retailflow.services import purchase_order_service

purchase_orders_bp = Blueprint('purchase_orders', __name__, url_prefix='/api')


@purchase_orders_bp.route('/create-purchase-order', methods=['POST'])
def create_purchase_order():
    """
    Create a purchase order with its lines.

    Body: {"supplier": {"code", "name"}, "orderDetails": [...], "totalCost": ...}
    """
    data = json_body()
    order_code, order_id = purchase_order_service.create_purchase_order(
        get_session(),
        data.get('supplier'),
        data.get('orderDetails'),
        data.get('totalCost'),
    )
    return jsonify({
        'message': 'Purchase order added successfully',
        'purchaseOrderId': order_id,
        'purchaseOrderCode': order_code,
    }), 200


@purchase_orders_bp.route('/get-purchase-orders', methods=['GET'])
def list_purchase_orders():
    orders = purchase_order_service.list_purchase_orders(get_session())
    return jsonify([o.to_dict() for o in orders]), 200


@purchase_orders_bp.route('/get-purchase-orders-details', methods=['GET'])
def purchase_order_details():
    lines = purchase_order_service.get_purchase_order_lines(get_session(), request.args.get('poCode'))
    if not lines:
        raise NotFoundError('No purchase order found for the given poCode')
    return jsonify([line.to_dict() for line in lines]), 200


@purchase_orders_bp.route('/delete-purchase-order', methods=['POST'])
def delete_purchase_order():
    data = json_body()
    deleted_lines = purchase_order_service.delete_purchase_order(get_session(), data.get('poCode'))
    return jsonify({
        'message': 'Purchase order and details deleted successfully.',
        'deletedLines': deleted_lines,
    }), 200
