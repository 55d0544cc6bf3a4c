"""Sales Invoice model."""
from sqlalchemy import Column, String, Date, Numeric, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from retailflow.database import Base, BigIntId


class SalesInvoice(Base):
    """Sales invoice issued to a customer, keyed by its generated code."""

    __tablename__ = 'sales_invoices'

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    code = Column(String(50), nullable=False, unique=True)
    customer_code = Column(String(50), nullable=True)
    post_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)
    payment_method = Column(String(50), nullable=True)
    total_amount = Column(Numeric(14, 2), nullable=False)
    discount_amount = Column(Numeric(14, 2), nullable=False, default=0)
    net_total = Column(Numeric(14, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    items = relationship('CartItem', back_populates='invoice', passive_deletes='all')

    def to_dict(self, include_items=False):
        data = {
            'id': self.id,
            'code': self.code,
            'customerCode': self.customer_code,
            'postDate': self.post_date.isoformat() if self.post_date else None,
            'dueDate': self.due_date.isoformat() if self.due_date else None,
            'paymentMethod': self.payment_method,
            'totalAmount': float(self.total_amount),
            'discountAmount': float(self.discount_amount),
            'netTotal': float(self.net_total),
        }
        if include_items:
            data['cartItems'] = [item.to_dict() for item in self.items]
        return data

    def __repr__(self):
        return f"<SalesInvoice(id={self.id}, code='{self.code}', net_total={self.net_total})>"
