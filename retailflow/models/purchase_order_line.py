"""Purchase Order Line model."""
from sqlalchemy import Column, String, Integer, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from retailflow.database import Base, BigIntId


class PurchaseOrderLine(Base):
    """Purchase order line, linked to its order by the order code."""

    __tablename__ = 'purchaseorderdetails'

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    po_code = Column(String(50), ForeignKey('purchaseorder.purchase_order_code'), nullable=False, index=True)
    product_code = Column(String(50), nullable=False)
    product_name = Column(String(200), nullable=True)
    qty = Column(Integer, nullable=False)
    cost = Column(Numeric(14, 2), nullable=False, default=0)

    # Relationships
    order = relationship('PurchaseOrder', back_populates='lines')

    def to_dict(self):
        return {
            'id': self.id,
            'poCode': self.po_code,
            'productCode': self.product_code,
            'productName': self.product_name,
            'qty': self.qty,
            'cost': float(self.cost) if self.cost is not None else 0,
        }

    def __repr__(self):
        return f"<PurchaseOrderLine(id={self.id}, po_code='{self.po_code}', qty={self.qty})>"
