"""
Unit tests for SQLAlchemy models and model helpers.
"""

import pytest
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from retailflow.models import Product, User, UserRole, is_discount_allowed, format_code


class TestFormatCode:
    """Tests for rendering business codes."""

    def test_pads_to_length(self):
        assert format_code('INV', 7, 5) == 'INV00007'

    def test_value_wider_than_length_is_kept_whole(self):
        assert format_code('SKU', 123456, 5) == 'SKU123456'

    def test_empty_prefix(self):
        assert format_code('', 42, 3) == '042'
        assert format_code(None, 42, 3) == '042'


class TestDiscountAllowed:
    """Tests for the derived discount flag."""

    @pytest.mark.parametrize('max_discount, expected', [
        (0, False),
        (Decimal('0.01'), True),
        (50, True),
        (Decimal('99.99'), True),
        (100, False),
        (None, False),
    ])
    def test_boundaries(self, max_discount, expected):
        assert is_discount_allowed(max_discount) is expected

    def test_hybrid_expression_filters_products(self, session):
        """Test the SQL side of discount_allowed matches the Python side."""
        session.add_all([
            Product(sku='SKU00001', name='No discount', category='A', quantity=1, max_discount=0),
            Product(sku='SKU00002', name='Some discount', category='A', quantity=1, max_discount=25),
            Product(sku='SKU00003', name='Full discount', category='A', quantity=1, max_discount=100),
        ])
        session.commit()

        allowed = session.query(Product).filter(Product.discount_allowed).all()

        assert [p.sku for p in allowed] == ['SKU00002']
        assert allowed[0].to_dict()['discountAllowed'] is True


class TestProductModel:
    """Tests for Product constraints."""

    def test_negative_quantity_rejected(self, session):
        session.add(Product(sku='SKU00010', name='Broken', category='A', quantity=-1))

        with pytest.raises(IntegrityError):
            session.commit()

    def test_sku_unique(self, session, product):
        session.add(Product(sku=product.sku, name='Duplicate', category='A', quantity=1))

        with pytest.raises(IntegrityError):
            session.commit()


class TestUserModel:
    """Tests for User password handling."""

    def test_password_is_hashed(self, session):
        role = session.query(UserRole).filter_by(role='cashier').one()
        user = User(username='cashier1', email='c1@test.com', role='cashier', roleid=role.id)
        user.set_password('s3cret-pass')
        session.add(user)
        session.commit()

        assert user.password != 's3cret-pass'
        assert user.password.startswith('scrypt')
        assert user.check_password('s3cret-pass') is True
        assert user.check_password('wrong') is False
        assert 'password' not in user.to_dict()
