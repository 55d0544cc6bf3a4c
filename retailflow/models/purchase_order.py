"""Purchase Order model."""
from sqlalchemy import Column, String, Date, Numeric, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from retailflow.database import Base, BigIntId


class PurchaseOrder(Base):
    """Purchase order placed with a supplier, keyed by its generated code."""

    __tablename__ = 'purchaseorder'

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    purchase_order_code = Column(String(50), nullable=False, unique=True)
    supplier_code = Column(String(50), nullable=False)
    supplier_name = Column(String(200), nullable=True)
    total_cost = Column(Numeric(14, 2), nullable=False, default=0)
    post_date = Column(Date, nullable=False)
    doc_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Lines are deleted explicitly before the order (no cascade)
    lines = relationship('PurchaseOrderLine', back_populates='order', passive_deletes='all')

    def to_dict(self):
        return {
            'id': self.id,
            'purchaseOrderCode': self.purchase_order_code,
            'supplierCode': self.supplier_code,
            'supplierName': self.supplier_name,
            'totalCost': float(self.total_cost) if self.total_cost is not None else 0,
            'postDate': self.post_date.isoformat() if self.post_date else None,
            'docDate': self.doc_date.isoformat() if self.doc_date else None,
        }

    def __repr__(self):
        return f"<PurchaseOrder(id={self.id}, code='{self.purchase_order_code}')>"
