"""Product model."""
from sqlalchemy import Column, String, Integer, Numeric, DateTime, CheckConstraint, and_
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.sql import func
from retailflow.database import Base, BigIntId


def is_discount_allowed(max_discount) -> bool:
    """A discount may be given only when 0 < max_discount < 100."""
    if max_discount is None:
        return False
    return 0 < max_discount < 100


class Product(Base):
    """Product model."""

    __tablename__ = 'products'
    __table_args__ = (
        CheckConstraint('quantity >= 0', name='ck_products_quantity_non_negative'),
        CheckConstraint('max_discount >= 0 AND max_discount <= 100', name='ck_products_max_discount_range'),
    )

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    sku = Column(String(50), nullable=False, unique=True)
    name = Column(String(200), nullable=False)
    category = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False, default=0, server_default='0')
    cost = Column(Numeric(12, 2), nullable=True)
    price = Column(Numeric(12, 2), nullable=True)
    image = Column(String(500), nullable=True)
    max_discount = Column(Numeric(5, 2), nullable=False, default=0, server_default='0')
    status = Column(Integer, nullable=False, default=1, server_default='1')
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    @hybrid_property
    def discount_allowed(self):
        """Derived flag: true iff 0 < max_discount < 100."""
        return is_discount_allowed(self.max_discount)

    @discount_allowed.expression
    def discount_allowed(cls):
        return and_(cls.max_discount > 0, cls.max_discount < 100)

    def to_dict(self):
        return {
            'id': self.id,
            'sku': self.sku,
            'productName': self.name,
            'category': self.category,
            'intQty': self.quantity,
            'cost': float(self.cost) if self.cost is not None else None,
            'price': float(self.price) if self.price is not None else None,
            'image': self.image,
            'maxDiscount': float(self.max_discount) if self.max_discount is not None else 0,
            'status': self.status,
            'discountAllowed': self.discount_allowed,
        }

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', sku='{self.sku}')>"
