"""User model - application users with username/password authentication."""
from sqlalchemy import Column, BigInteger, String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from werkzeug.security import generate_password_hash, check_password_hash
from retailflow.database import Base, BigIntId


class User(Base):
    """Application user."""

    __tablename__ = 'users'

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, unique=True)
    password = Column(String(255), nullable=False)  # scrypt hash, never plain text
    email = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False)
    roleid = Column(BigInteger, ForeignKey('userroles.id'), nullable=False)
    status = Column(Integer, nullable=False, default=1, server_default='1')
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    user_role = relationship('UserRole', back_populates='users')

    def set_password(self, password):
        """Hash and store the password."""
        self.password = generate_password_hash(password, method='scrypt')

    def check_password(self, password):
        """Check password against hash."""
        if not self.password:
            return False
        return check_password_hash(self.password, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'role': self.role,
            'roleid': self.roleid,
            'status': self.status,
        }

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
