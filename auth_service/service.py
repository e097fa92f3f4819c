"""Lógica de negocio de autenticación y perfil: registro, login, consulta y edición de perfil."""

import re
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth_service import schemas
from auth_service.errors import (
    EmailExists,
    InvalidCredential,
    InvalidEmail,
    InvalidName,
    InvalidPhone,
    PasswordTooShort,
    UserNotFound,
)
from auth_service.models import User
from auth_service.password import PasswordHasher
from auth_service.repository import UserRepository
from auth_service.tokens import ACCESS_TOKEN_TTL, TokenIssuer

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
NON_DIGITS_PATTERN = re.compile(r"[^0-9]+")

MIN_PASSWORD_LENGTH = 8
MAX_NAME_LENGTH = 100
PHONE_DIGITS = 10


def is_valid_email(email: str) -> bool:
    return bool(email) and EMAIL_PATTERN.fullmatch(email) is not None


def normalize_name(value: str) -> str:
    """Recorta espacios; el resultado debe tener entre 1 y 100 caracteres."""
    name = value.strip()
    if not name or len(name) > MAX_NAME_LENGTH:
        raise InvalidName()
    return name


def normalize_phone(value: str) -> str:
    """Elimina todo lo que no sea dígito; deben quedar exactamente 10 dígitos."""
    digits = NON_DIGITS_PATTERN.sub("", value)
    if len(digits) != PHONE_DIGITS:
        raise InvalidPhone()
    return digits


class AuthService:
    """
    Orquesta validaciones, hasher, emisor de tokens y repositorio de usuarios.
    Todas las dependencias se inyectan al construir el servicio.
    """

    def __init__(self, users: UserRepository, hasher: PasswordHasher, tokens: TokenIssuer):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    def register(self, email: str, password: str) -> schemas.RegisterResponse:
        if not is_valid_email(email):
            raise InvalidEmail()
        if len(password) < MIN_PASSWORD_LENGTH:
            raise PasswordTooShort()

        # Pre-chequeo; la garantía real es el índice único de la tabla.
        if self.users.count_by_email(email) > 0:
            logger.info(f"Registro rechazado, email ya registrado: {email}")
            raise EmailExists()

        new_user = User(email=email, password_hash=self.hasher.hash(password))
        try:
            new_user = self.users.create(new_user)
        except IntegrityError as e:
            logger.warning(f"Registro concurrente detectado para {email}: {e.orig}")
            raise EmailExists() from e

        logger.info(f"Usuario registrado: user_id={new_user.id}")
        return schemas.RegisterResponse.model_validate(new_user)

    def login(self, email: str, password: str) -> schemas.LoginResponse:
        """
        Autentica al usuario y emite un token de acceso de 15 minutos.
        Todas las causas de fallo devuelven el mismo InvalidCredential.
        """
        if not email or not password:
            raise InvalidCredential()

        user = self.users.find_by_email(email)
        if user is None or not user.is_active:
            logger.warning("Login failed: unknown or inactive account")
            raise InvalidCredential()
        if not self.hasher.verify(user.password_hash, password):
            logger.warning(f"Login failed for user_id: {user.id}")
            raise InvalidCredential()

        user_id, user_email = user.id, user.email
        user.last_login_at = datetime.now(timezone.utc)
        try:
            self.users.save(user)
        except SQLAlchemyError as e:
            # No bloquea el login si falla esta actualización secundaria
            logger.error(f"No se pudo actualizar last_login_at para user_id {user_id}: {e}")

        access_token = self.tokens.issue(user_id, user_email, ACCESS_TOKEN_TTL)
        logger.info(f"Login successful for user_id: {user_id}")

        return schemas.LoginResponse(
            access_token=access_token,
            token_type="Bearer",
            expires_in=int(ACCESS_TOKEN_TTL.total_seconds()),
        )

    def get_profile(self, user_id: int) -> schemas.ProfileResponse:
        return schemas.ProfileResponse.model_validate(self._get_user(user_id))

    def update_profile(
        self,
        user_id: int,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> schemas.ProfileResponse:
        """Actualización parcial: solo se aplican los campos recibidos (None = ausente)."""
        user = self._get_user(user_id)

        # Se valida todo antes de tocar la entidad
        changes = {}
        if first_name is not None:
            changes["first_name"] = normalize_name(first_name)
        if last_name is not None:
            changes["last_name"] = normalize_name(last_name)
        if phone is not None:
            changes["phone"] = normalize_phone(phone)

        for field, value in changes.items():
            setattr(user, field, value)

        user = self.users.save(user)
        logger.info(f"Perfil actualizado para user_id {user_id}: campos={sorted(changes)}")
        return schemas.ProfileResponse.model_validate(user)

    def me(self, user_id: int) -> schemas.MeResponse:
        return schemas.MeResponse.model_validate(self._get_user(user_id))

    def _get_user(self, user_id: int) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            logger.error(f"Usuario autenticado con ID {user_id} no existe en la base de datos.")
            raise UserNotFound()
        return user
