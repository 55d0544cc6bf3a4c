"""Sales reports blueprint: net totals per day, month and year."""
from flask import Blueprint, jsonify
from retailflow.database import get_session
from retailflow.services.report_service import get_sales_totals

reports_bp = Blueprint('reports', __name__, url_prefix='/api/sales')


@reports_bp.route('/by-date', methods=['GET'])
def sales_by_date():
    return jsonify({'data': get_sales_totals(get_session(), 'date')}), 200


@reports_bp.route('/by-month', methods=['GET'])
def sales_by_month():
    return jsonify({'data': get_sales_totals(get_session(), 'month')}), 200


@reports_bp.route('/by-year', methods=['GET'])
def sales_by_year():
    return jsonify({'data': get_sales_totals(get_session(), 'year')}), 200
