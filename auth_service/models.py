"""Define el modelo de la tabla 'users' usando SQLAlchemy ORM."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from auth_service.db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    # Campos de perfil
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(20), index=True, nullable=True)
    membership_level = Column(String(20), nullable=False, default="Bronze")
    membership_code = Column(String(50), unique=True, nullable=True)
    points = Column(Integer, nullable=False, default=0)
    joined_at = Column(DateTime(timezone=True), nullable=True)
