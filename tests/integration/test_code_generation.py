"""
Integration tests for business code generation.
"""

import threading
import pytest
from retailflow import database
from retailflow.database import get_session
from retailflow.exceptions import NotFoundError, ValidationError
from retailflow.models import CodeFormat, CodeType, SalesInvoice, PurchaseOrder, PurchaseOrderLine
from retailflow.services.code_service import (
    next_code, generate_entry_code, update_code_format, resolve_code_type, seed_code_formats
)
from retailflow.services.invoice_service import save_invoice
from retailflow.services.purchase_order_service import create_purchase_order


class TestSequentialGeneration:

    def test_consecutive_codes(self, session):
        """Test N generations give N distinct consecutive codes."""
        codes = [generate_entry_code(session, CodeType.INVOICE) for _ in range(5)]

        assert codes == ['INV00001', 'INV00002', 'INV00003', 'INV00004', 'INV00005']

    def test_counters_are_per_type(self, session):
        generate_entry_code(session, CodeType.INVOICE)
        generate_entry_code(session, CodeType.INVOICE)

        assert generate_entry_code(session, CodeType.PRODUCT) == 'SKU00001'

    def test_rollback_releases_code(self, session):
        """Test a rolled back transaction does not consume the counter."""
        assert next_code(session, CodeType.CUSTOMER) == 'CUS00001'
        session.rollback()

        assert generate_entry_code(session, CodeType.CUSTOMER) == 'CUS00001'

    def test_overflow_widens_code(self, session):
        fmt = session.query(CodeFormat).filter_by(code=int(CodeType.RECEIPT)).one()
        fmt.length = 2
        fmt.next_value = 99
        session.commit()

        assert generate_entry_code(session, CodeType.RECEIPT) == 'RCP100'

    def test_unknown_type(self, session):
        with pytest.raises(NotFoundError):
            generate_entry_code(session, 99)

    def test_seed_is_idempotent(self, session):
        assert seed_code_formats(session) == 0
        assert session.query(CodeFormat).count() == len(CodeType)


class TestResolveCodeType:

    @pytest.mark.parametrize('value, expected', [
        (CodeType.INVOICE, 6),
        (3, 3),
        ('4', 4),
        ('purchase_order', 3),
        ('Invoice', 6),
    ])
    def test_accepted_forms(self, value, expected):
        assert resolve_code_type(value) == expected

    @pytest.mark.parametrize('value', [None, True, 'nonsense'])
    def test_rejected_forms(self, value):
        with pytest.raises(ValidationError):
            resolve_code_type(value)


class TestUpdateCodeFormat:

    def test_prefix_and_length_change_keeps_counter(self, session):
        generate_entry_code(session, CodeType.SUPPLIER)

        fmt = update_code_format(session, CodeType.SUPPLIER, prefix='VEN', length=3)

        assert fmt.sample == 'VEN002'
        assert generate_entry_code(session, CodeType.SUPPLIER) == 'VEN002'

    def test_invalid_length(self, session):
        with pytest.raises(ValidationError):
            update_code_format(session, CodeType.SUPPLIER, length=0)


class TestConcurrentGeneration:

    def test_no_duplicates_under_concurrency(self, app):
        """Test concurrent generators never hand out the same code."""
        threads_count = 4
        per_thread = 10
        results = []
        errors = []
        lock = threading.Lock()

        def worker():
            session = get_session()
            try:
                for _ in range(per_thread):
                    code = generate_entry_code(session, CodeType.INVOICE)
                    with lock:
                        results.append(code)
            except Exception as e:
                with lock:
                    errors.append(e)
            finally:
                database.db_session.remove()

        threads = [threading.Thread(target=worker) for _ in range(threads_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        total = threads_count * per_thread
        assert errors == []
        assert len(results) == total
        assert len(set(results)) == total
        assert sorted(results) == [f'INV{n:05d}' for n in range(1, total + 1)]

        session = get_session()
        fmt = session.query(CodeFormat).filter_by(code=int(CodeType.INVOICE)).one()
        assert fmt.next_value == total

    def test_composite_writers_never_share_a_code(self, session, customer, supplier):
        """Test concurrent invoices, purchase orders and entry codes all get distinct codes."""
        customer_code = customer.code
        supplier_code = supplier.code
        cart = [{'sku': 'SKU00001', 'name': 'Pen', 'quantity': 1, 'price': 2}]
        lines = [{'sku': 'SKU00001', 'productName': 'Pen', 'quantity': 1, 'cost': 1}]
        threads_count = 4
        per_thread = 5
        invoice_codes = []
        order_codes = []
        errors = []
        lock = threading.Lock()

        def worker():
            thread_session = get_session()
            try:
                for _ in range(per_thread):
                    invoice_code = save_invoice(thread_session, {'code': customer_code}, {}, cart)
                    entry_code = generate_entry_code(thread_session, CodeType.INVOICE)
                    order_code, _ = create_purchase_order(thread_session, {'code': supplier_code}, lines, 1)
                    with lock:
                        invoice_codes.extend([invoice_code, entry_code])
                        order_codes.append(order_code)
            except Exception as e:
                with lock:
                    errors.append(e)
            finally:
                database.db_session.remove()

        threads = [threading.Thread(target=worker) for _ in range(threads_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        total = threads_count * per_thread
        assert errors == []
        assert sorted(invoice_codes) == [f'INV{n:05d}' for n in range(1, 2 * total + 1)]
        assert sorted(order_codes) == [f'PO{n:05d}' for n in range(1, total + 1)]

        session.expire_all()
        assert session.query(SalesInvoice).count() == total
        assert session.query(PurchaseOrder).count() == total
        assert session.query(PurchaseOrderLine).count() == total
