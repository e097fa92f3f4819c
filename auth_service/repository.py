"""Acceso a la tabla 'users': búsquedas por clave única, altas y guardado."""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from auth_service.models import User

logger = logging.getLogger(__name__)


class UserRepository:
    """CRUD mínimo sobre User ligado a una sesión de SQLAlchemy (una por petición)."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.execute(select(User).where(User.email == email)).scalars().first()

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def count_by_email(self, email: str) -> int:
        return self.db.execute(select(func.count(User.id)).where(User.email == email)).scalar_one()

    def create(self, user: User) -> User:
        """Inserta el usuario. La unicidad del email la garantiza el índice único (IntegrityError)."""
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user

    def save(self, user: User) -> User:
        self._commit()
        self.db.refresh(user)
        return user

    def rollback(self) -> None:
        self.db.rollback()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
