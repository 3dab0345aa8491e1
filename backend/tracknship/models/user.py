"""
User database model.

Users are keyed by email and created on first login.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from backend.tracknship.db.session import Base
from backend.tracknship.models.enums import UserRole, UserStatus


class User(Base):
    """
    User model for customers, admins and delivery men.

    ``delivered_count`` is a derived statistic maintained incrementally by the
    lifecycle engine; it is only meaningful for delivery men.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(150), nullable=True)
    photo_url = Column(String(500), nullable=True)
    phone = Column(String(30), nullable=True)

    role = Column(Enum(UserRole), default=UserRole.UNSET, nullable=False, index=True)
    status = Column(Enum(UserStatus), nullable=True)

    delivered_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
