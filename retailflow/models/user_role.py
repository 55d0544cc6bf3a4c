"""UserRole model."""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from retailflow.database import Base, BigIntId


class UserRole(Base):
    """Role a user can be assigned (e.g. admin, cashier)."""

    __tablename__ = 'userroles'

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    role = Column(String(50), nullable=False, unique=True)

    # Relationships
    users = relationship('User', back_populates='user_role')

    def __repr__(self):
        return f"<UserRole(id={self.id}, role='{self.role}')>"
