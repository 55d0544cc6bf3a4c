"""Cart Item model (sales invoice line)."""
from sqlalchemy import Column, String, Integer, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from retailflow.database import Base, BigIntId


class CartItem(Base):
    """Item sold on an invoice, linked by the invoice code."""

    __tablename__ = 'cart_items'

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    invoice_code = Column(String(50), ForeignKey('sales_invoices.code'), nullable=False, index=True)
    sku = Column(String(50), nullable=False)
    name = Column(String(200), nullable=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    discount = Column(Numeric(12, 2), nullable=False, default=0, server_default='0')

    # Relationships
    invoice = relationship('SalesInvoice', back_populates='items')

    def to_dict(self):
        return {
            'id': self.id,
            'invoiceCode': self.invoice_code,
            'sku': self.sku,
            'name': self.name,
            'quantity': self.quantity,
            'price': float(self.price),
            'discount': float(self.discount),
        }

    def __repr__(self):
        return f"<CartItem(id={self.id}, invoice_code='{self.invoice_code}', sku='{self.sku}')>"
