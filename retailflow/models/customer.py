"""Customer model."""
from sqlalchemy import Column, String, Text, Integer, DateTime
from sqlalchemy.sql import func
from retailflow.database import Base, BigIntId


class Customer(Base):
    """Customer, identified by its generated code."""

    __tablename__ = 'customers'

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    code = Column(String(50), nullable=False, unique=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=True)
    contact = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    status = Column(Integer, nullable=False, default=1, server_default='1')
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def to_dict(self):
        return {
            'id': self.id,
            'code': self.code,
            'name': self.name,
            'email': self.email,
            'contact': self.contact,
            'address': self.address,
            'city': self.city,
            'country': self.country,
            'status': self.status,
        }

    def __repr__(self):
        return f"<Customer(id={self.id}, code='{self.code}', name='{self.name}')>"
