"""
Integration tests for stock deduction and sales reports.
"""

import threading
import pytest
from retailflow import database
from retailflow.database import get_session
from retailflow.exceptions import InsufficientStockError, ValidationError
from retailflow.models import Product
from retailflow.services.inventory_service import deduct_inventory
from retailflow.services.invoice_service import save_invoice
from retailflow.services.report_service import get_sales_totals


def _stock(session, sku):
    return session.query(Product).filter_by(sku=sku).one().quantity


class TestDeductInventory:

    def test_stock_never_goes_negative(self, session, product):
        """Test stock 10 minus 4, 4, 4 gives success, success, failure and leaves 2."""
        sku = product.sku

        assert deduct_inventory(session, [{'sku': sku, 'quantity': 4}]) == 1
        assert deduct_inventory(session, [{'sku': sku, 'quantity': 4}]) == 1
        with pytest.raises(InsufficientStockError) as exc_info:
            deduct_inventory(session, [{'sku': sku, 'quantity': 4}])

        assert exc_info.value.status_code == 409
        assert exc_info.value.payload == {'sku': sku}
        assert _stock(session, sku) == 2

    def test_concurrent_deductions_never_oversell(self, session, product):
        """Test six threads taking 3 each from stock 10: three succeed and 1 is left."""
        sku = product.sku
        threads_count = 6
        barrier = threading.Barrier(threads_count)
        succeeded = []
        rejected = []
        errors = []
        lock = threading.Lock()

        def worker():
            thread_session = get_session()
            try:
                barrier.wait()
                deduct_inventory(thread_session, [{'sku': sku, 'quantity': 3}])
                with lock:
                    succeeded.append(sku)
            except InsufficientStockError as e:
                with lock:
                    rejected.append(e.sku)
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

        assert errors == []
        assert len(succeeded) == 3
        assert rejected == [sku] * 3
        session.expire_all()
        assert _stock(session, sku) == 1

    def test_batch_is_all_or_nothing(self, session, product):
        session.add(Product(sku='SKU90002', name='Scarce', category='Widgets', quantity=1))
        session.commit()

        with pytest.raises(InsufficientStockError, match='SKU90002'):
            deduct_inventory(session, [
                {'sku': product.sku, 'quantity': 3},
                {'sku': 'SKU90002', 'quantity': 5},
            ])

        assert _stock(session, product.sku) == 10
        assert _stock(session, 'SKU90002') == 1

    def test_unknown_sku(self, session):
        with pytest.raises(InsufficientStockError, match='not found or insufficient stock'):
            deduct_inventory(session, [{'sku': 'SKU00404', 'quantity': 1}])

    @pytest.mark.parametrize('products, message', [
        ([], 'array of products'),
        (None, 'array of products'),
        ([{'quantity': 1}], 'Missing required fields'),
        ([{'sku': 'SKU90001', 'quantity': 0}], 'greater than zero'),
    ])
    def test_invalid_payloads(self, session, products, message):
        with pytest.raises(ValidationError, match=message):
            deduct_inventory(session, products)


class TestSalesReports:

    def _sell(self, session, customer, post_date, price):
        save_invoice(session, {'code': customer.code}, {'postDate': post_date},
                     [{'sku': 'SKU00001', 'quantity': 1, 'price': price}])

    def test_totals_per_period(self, app, session, customer):
        self._sell(session, customer, '2023-12-31', 5)
        self._sell(session, customer, '2024-01-15', 10)
        self._sell(session, customer, '2024-01-15', 2.5)
        self._sell(session, customer, '2024-02-01', 7)

        assert get_sales_totals(session, 'date') == [
            {'date': '2023-12-31', 'total_net': 5.0},
            {'date': '2024-01-15', 'total_net': 12.5},
            {'date': '2024-02-01', 'total_net': 7.0},
        ]
        assert get_sales_totals(session, 'month') == [
            {'month': '2023-12', 'total_net': 5.0},
            {'month': '2024-01', 'total_net': 12.5},
            {'month': '2024-02', 'total_net': 7.0},
        ]
        assert get_sales_totals(session, 'year') == [
            {'year': 2023, 'total_net': 5.0},
            {'year': 2024, 'total_net': 19.5},
        ]

    def test_unknown_period(self, session):
        with pytest.raises(ValidationError):
            get_sales_totals(session, 'week')
