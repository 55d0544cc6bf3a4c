"""Purchase order service with transactional logic."""
import logging
from datetime import date
from typing import List, Dict, Any, Tuple

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from retailflow.exceptions import RetailError, ValidationError, NotFoundError, InternalError
from retailflow.models import PurchaseOrder, PurchaseOrderLine, CodeType
from retailflow.services.code_service import next_code, record_generated
from retailflow.utils.number_format import parse_money, parse_int

logger = logging.getLogger(__name__)


def create_purchase_order(session, supplier: Dict[str, Any], lines: List[Dict[str, Any]],
                          total_cost) -> Tuple[str, int]:
    """
    Create a purchase order with its lines in one transaction.

    Steps:
    1. Validate supplier and lines
    2. Generate the PURCHASE_ORDER code (same transaction)
    3. Insert purchaseorder row (post date = doc date = today)
    4. Insert all purchaseorderdetails rows keyed by the order code
    5. Commit

    Any failure rolls back the order, its lines and the counter increment.

    Args:
        session: SQLAlchemy session
        supplier: dict with 'code' and optional 'name'
        lines: list of {sku, productName, quantity, cost}
        total_cost: order total

    Returns:
        (order_code, order_id)

    Raises:
        ValidationError: For invalid payloads
        InternalError: For storage failures
    """
    if not isinstance(supplier, dict) or not supplier.get('code'):
        raise ValidationError('Supplier code is required')

    try:
        total = parse_money(total_cost, 'totalCost')
    except ValueError as e:
        raise ValidationError(str(e))

    validated_lines = _validate_lines(lines or [])

    try:
        order_code = next_code(session, CodeType.PURCHASE_ORDER)
        today = date.today()

        order = PurchaseOrder(
            purchase_order_code=order_code,
            supplier_code=supplier['code'],
            supplier_name=supplier.get('name'),
            total_cost=total,
            post_date=today,
            doc_date=today,
        )
        session.add(order)
        session.flush()  # Parent row must exist before lines reference its code

        if validated_lines:
            session.add_all([
                PurchaseOrderLine(po_code=order_code, **line)
                for line in validated_lines
            ])
            session.flush()

        session.commit()
        record_generated(CodeType.PURCHASE_ORDER)
        logger.info(f"[PO] Created purchase order {order_code} with {len(validated_lines)} lines")
        return order_code, order.id

    except RetailError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"[PO] Error creating purchase order, rolled back: {e}")
        raise InternalError('An error occurred while creating the purchase order')


def delete_purchase_order(session, order_code: str) -> int:
    """
    Delete a purchase order and its lines (lines first) in one transaction.

    Returns:
        Number of lines deleted

    Raises:
        ValidationError: If order_code is empty
        NotFoundError: If the order does not exist
    """
    if not order_code:
        raise ValidationError('Missing purchase order code (poCode)')

    try:
        order = (session.query(PurchaseOrder)
                 .filter(PurchaseOrder.purchase_order_code == order_code)
                 .with_for_update()
                 .first())
        if not order:
            raise NotFoundError(f'Purchase order {order_code} not found')

        deleted_lines = session.execute(
            delete(PurchaseOrderLine)
            .where(PurchaseOrderLine.po_code == order_code)
            .execution_options(synchronize_session=False)
        ).rowcount

        session.delete(order)
        session.commit()

        logger.info(f"[PO] Deleted purchase order {order_code} and {deleted_lines} lines")
        return deleted_lines

    except RetailError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"[PO] Error deleting purchase order {order_code}: {e}")
        raise InternalError('Error deleting purchase order')


def list_purchase_orders(session) -> List[PurchaseOrder]:
    return session.query(PurchaseOrder).order_by(PurchaseOrder.id).all()


def get_purchase_order_lines(session, order_code: str) -> List[PurchaseOrderLine]:
    """Return the lines of an order (empty list when none exist)."""
    if not order_code:
        raise ValidationError('poCode is required')
    return (session.query(PurchaseOrderLine)
            .filter(PurchaseOrderLine.po_code == order_code)
            .order_by(PurchaseOrderLine.id)
            .all())


def _validate_lines(lines) -> List[Dict[str, Any]]:
    """Normalize incoming order details into PurchaseOrderLine kwargs."""
    if not isinstance(lines, list):
        raise ValidationError('orderDetails must be a list')

    validated = []
    for index, item in enumerate(lines):
        if not isinstance(item, dict):
            raise ValidationError(f'Order line at index {index} is invalid')
        sku = item.get('sku') or item.get('productCode')
        if not sku:
            raise ValidationError(f'Missing sku in order line at index {index}')
        try:
            qty = parse_int(item.get('quantity', item.get('qty')), 'quantity', minimum=1)
            cost = parse_money(item.get('cost', 0), 'cost')
        except ValueError as e:
            raise ValidationError(f'Order line at index {index}: {e}')

        validated.append({
            'product_code': sku,
            'product_name': item.get('productName') or item.get('name'),
            'qty': qty,
            'cost': cost,
        })
    return validated
