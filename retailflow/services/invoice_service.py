"""Sales invoice service with transactional logic."""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Dict, Any, Optional

from sqlalchemy.exc import SQLAlchemyError

from retailflow.exceptions import RetailError, ValidationError, NotFoundError, InternalError
from retailflow.models import SalesInvoice, CartItem, CodeType
from retailflow.services.code_service import next_code, record_generated
from retailflow.utils.number_format import parse_money, parse_optional_money, parse_int, parse_date, CENT

logger = logging.getLogger(__name__)


def save_invoice(session, customer: Dict[str, Any], invoice: Optional[Dict[str, Any]],
                 cart_items: List[Dict[str, Any]]) -> str:
    """
    Save a sales invoice with its cart items (all or nothing).

    Steps:
    1. Validate customer, cart items and totals
    2. Generate the INVOICE code inside the transaction
    3. Insert sales_invoices row
    4. Insert one cart_items row per item (discount defaults to 0)
    5. Commit; any failure rolls back everything, counter included

    Totals are derived from the items: total = sum(quantity x price),
    discount = sum(discount), net = total - discount. Totals sent by the
    client must match them to the cent.

    Args:
        session: SQLAlchemy session
        customer: dict with 'code'
        invoice: dict with postDate, dueDate, paymentMethod and optional
            totalAmount, discountAmount, netTotal
        cart_items: list of {sku, name, quantity, price, discount}

    Returns:
        invoice_code: Generated invoice code

    Raises:
        ValidationError: For invalid payloads (including an empty cart)
        InternalError: For storage failures
    """
    if not isinstance(customer, dict) or not customer.get('code'):
        raise ValidationError('Customer code is required')

    invoice = invoice or {}
    if not isinstance(invoice, dict):
        raise ValidationError('invoice must be an object')
    items = _validate_cart_items(cart_items)
    totals = _compute_totals(items, invoice)

    try:
        post_date = parse_date(invoice.get('postDate'), 'postDate', default=date.today())
        due_date = parse_date(invoice.get('dueDate'), 'dueDate')
    except ValueError as e:
        raise ValidationError(str(e))

    if due_date and due_date < post_date:
        raise ValidationError('dueDate cannot be before postDate')

    try:
        invoice_code = next_code(session, CodeType.INVOICE)

        sales_invoice = SalesInvoice(
            code=invoice_code,
            customer_code=customer['code'],
            post_date=post_date,
            due_date=due_date,
            payment_method=invoice.get('paymentMethod'),
            total_amount=totals['total_amount'],
            discount_amount=totals['discount_amount'],
            net_total=totals['net_total'],
        )
        session.add(sales_invoice)
        session.flush()

        for item in items:
            session.add(CartItem(invoice_code=invoice_code, **item))
        session.flush()

        session.commit()
        record_generated(CodeType.INVOICE)
        logger.info(f"[INVOICE] Saved invoice {invoice_code} with {len(items)} items, net {totals['net_total']}")

    except RetailError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"[INVOICE] Error saving invoice, rolled back: {e}")
        raise InternalError('Failed to save invoice.')

    _invalidate_reports_cache()
    return invoice_code


def list_invoices(session) -> List[SalesInvoice]:
    return session.query(SalesInvoice).order_by(SalesInvoice.id).all()


def get_invoice(session, invoice_code: str) -> SalesInvoice:
    """Return the invoice with the given code or raise NotFoundError."""
    if not invoice_code:
        raise ValidationError('Invoice code is required')
    sales_invoice = session.query(SalesInvoice).filter(SalesInvoice.code == invoice_code).first()
    if not sales_invoice:
        raise NotFoundError(f'Invoice {invoice_code} not found')
    return sales_invoice


# =====================================================
# PRIVATE HELPERS
# =====================================================

def _validate_cart_items(cart_items) -> List[Dict[str, Any]]:
    """Normalize cart items into CartItem kwargs; an empty cart is rejected."""
    if not isinstance(cart_items, list) or not cart_items:
        raise ValidationError('An invoice requires at least one cart item')

    validated = []
    for index, item in enumerate(cart_items):
        if not isinstance(item, dict):
            raise ValidationError(f'Cart item at index {index} is invalid')
        if not item.get('sku'):
            raise ValidationError(f'Missing sku in cart item at index {index}')
        try:
            quantity = parse_int(item.get('quantity'), 'quantity', minimum=1)
            price = parse_money(item.get('price'), 'price')
            discount = parse_optional_money(item.get('discount'), 'discount', default=Decimal('0.00'))
        except ValueError as e:
            raise ValidationError(f'Cart item at index {index}: {e}')

        if discount > (price * quantity):
            raise ValidationError(f'Cart item at index {index}: discount exceeds line amount')

        validated.append({
            'sku': item['sku'],
            'name': item.get('name'),
            'quantity': quantity,
            'price': price,
            'discount': discount,
        })
    return validated


def _compute_totals(items: List[Dict[str, Any]], invoice: Dict[str, Any]) -> Dict[str, Decimal]:
    """Derive invoice totals from the items and check client-sent totals against them."""
    total_amount = sum((item['price'] * item['quantity'] for item in items), Decimal('0.00')).quantize(CENT)
    discount_amount = sum((item['discount'] for item in items), Decimal('0.00')).quantize(CENT)
    net_total = (total_amount - discount_amount).quantize(CENT)

    computed = {
        'total_amount': total_amount,
        'discount_amount': discount_amount,
        'net_total': net_total,
    }
    sent_fields = {
        'totalAmount': 'total_amount',
        'discountAmount': 'discount_amount',
        'netTotal': 'net_total',
    }
    for field, key in sent_fields.items():
        try:
            sent = parse_optional_money(invoice.get(field), field)
        except ValueError as e:
            raise ValidationError(str(e))
        if sent is not None and sent != computed[key]:
            raise ValidationError(
                f'{field} {sent} does not match the cart items ({computed[key]})'
            )
    return computed


def _invalidate_reports_cache():
    from retailflow.services.cache_service import get_cache
    try:
        get_cache().invalidate_module('reports')
    except RuntimeError:
        logger.debug("[CACHE] Cache not initialized, nothing to invalidate")
