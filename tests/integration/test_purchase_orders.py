"""
Integration tests for purchase orders (order + lines written as a unit).
"""

import pytest
from datetime import date
from decimal import Decimal
from retailflow.exceptions import ValidationError, NotFoundError
from retailflow.models import PurchaseOrder, PurchaseOrderLine, CodeFormat, CodeType
from retailflow.services.purchase_order_service import (
    create_purchase_order, delete_purchase_order, get_purchase_order_lines, list_purchase_orders
)


def _lines(count):
    return [
        {'sku': f'SKU0000{i}', 'productName': f'Item {i}', 'quantity': i, 'cost': '2.50'}
        for i in range(1, count + 1)
    ]


class TestCreatePurchaseOrder:

    def test_order_with_k_lines(self, session, supplier):
        """Test an order with K lines stores exactly K lines keyed by its code."""
        order_code, order_id = create_purchase_order(
            session, {'code': supplier.code, 'name': supplier.name}, _lines(3), '15.00'
        )

        order = session.query(PurchaseOrder).filter_by(id=order_id).one()
        assert order.purchase_order_code == order_code == 'PO00001'
        assert order.supplier_code == supplier.code
        assert order.total_cost == Decimal('15.00')
        assert order.post_date == order.doc_date == date.today()

        lines = get_purchase_order_lines(session, order_code)
        assert len(lines) == 3
        assert {line.po_code for line in lines} == {order_code}
        assert [line.qty for line in lines] == [1, 2, 3]

    def test_invalid_line_writes_nothing(self, session, supplier):
        lines = _lines(2) + [{'sku': 'SKU00009', 'quantity': 0, 'cost': 1}]

        with pytest.raises(ValidationError):
            create_purchase_order(session, {'code': supplier.code}, lines, 10)

        assert session.query(PurchaseOrder).count() == 0
        assert session.query(PurchaseOrderLine).count() == 0
        fmt = session.query(CodeFormat).filter_by(code=int(CodeType.PURCHASE_ORDER)).one()
        assert fmt.next_value == 0

    @pytest.mark.parametrize('supplier', [{}, None, 'SUP90001', ['SUP90001']])
    def test_supplier_required(self, session, supplier):
        with pytest.raises(ValidationError, match='Supplier code is required'):
            create_purchase_order(session, supplier, _lines(1), 1)

    def test_listing(self, session, supplier):
        create_purchase_order(session, {'code': supplier.code}, _lines(1), 2.5)
        create_purchase_order(session, {'code': supplier.code}, _lines(1), 2.5)

        codes = [o.purchase_order_code for o in list_purchase_orders(session)]
        assert codes == ['PO00001', 'PO00002']


class TestDeletePurchaseOrder:

    def test_delete_leaves_no_lines(self, session, supplier):
        order_code, _ = create_purchase_order(session, {'code': supplier.code}, _lines(4), 25)

        deleted = delete_purchase_order(session, order_code)

        assert deleted == 4
        assert session.query(PurchaseOrder).count() == 0
        assert session.query(PurchaseOrderLine).filter_by(po_code=order_code).count() == 0

    def test_delete_unknown_order(self, session):
        with pytest.raises(NotFoundError):
            delete_purchase_order(session, 'PO99999')

    def test_delete_requires_code(self, session):
        with pytest.raises(ValidationError, match='poCode'):
            delete_purchase_order(session, '')
