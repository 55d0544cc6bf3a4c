"""Inventory service - stock deduction after a sale."""
import logging
from typing import List, Dict, Any

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from retailflow.exceptions import RetailError, ValidationError, InsufficientStockError, InternalError
from retailflow.models import Product
from retailflow.utils.number_format import parse_int

logger = logging.getLogger(__name__)


def deduct_inventory(session, products: List[Dict[str, Any]]) -> int:
    """
    Deduct stock for a batch of {sku, quantity} entries (all or nothing).

    Each entry is one conditional UPDATE:

        UPDATE products SET quantity = quantity - :q
        WHERE sku = :sku AND quantity >= :q

    so the stock check and the decrement happen atomically on the row.
    The first entry that updates no row (unknown SKU or not enough stock)
    rolls back the whole batch.

    Returns:
        Number of products updated

    Raises:
        ValidationError: If the batch is empty or an entry is malformed
        InsufficientStockError: Naming the first SKU that could not be deducted
    """
    entries = _validate_entries(products)

    try:
        for sku, quantity in entries:
            result = session.execute(
                update(Product)
                .where(Product.sku == sku, Product.quantity >= quantity)
                .values(quantity=Product.quantity - quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise InsufficientStockError(sku)

        session.commit()
        logger.info(f"[INVENTORY] Deducted stock for {len(entries)} products")
        return len(entries)

    except InsufficientStockError as e:
        session.rollback()
        logger.warning(f"[INVENTORY] Deduction rejected for SKU {e.sku}; batch rolled back")
        raise
    except RetailError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"[INVENTORY] Error updating products: {e}")
        raise InternalError('An error occurred while updating products.')


def _validate_entries(products) -> List[tuple]:
    if not isinstance(products, list) or not products:
        raise ValidationError('Request must include an array of products with SKU and quantity.')

    missing = [
        f'Product at index {index}'
        for index, item in enumerate(products)
        if not isinstance(item, dict) or not item.get('sku') or item.get('quantity') is None
    ]
    if missing:
        raise ValidationError(f"Missing required fields in products: {', '.join(missing)}")

    entries = []
    for item in products:
        try:
            quantity = parse_int(item['quantity'], 'quantity', minimum=1)
        except ValueError:
            raise ValidationError(f"Quantity must be greater than zero for SKU: {item['sku']}")
        entries.append((item['sku'], quantity))
    return entries
