"""Product category model."""
from sqlalchemy import Column, String, Integer
from retailflow.database import Base, BigIntId


class ProductCategory(Base):
    """Product Category."""

    __tablename__ = 'productcategories'

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    category = Column(String(100), nullable=False)
    status = Column(Integer, nullable=False, default=1, server_default='1')

    def to_dict(self):
        return {'id': self.id, 'category': self.category, 'status': self.status}

    def __repr__(self):
        return f"<ProductCategory(id={self.id}, category='{self.category}')>"
