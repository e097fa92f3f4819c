"""Dependencias de FastAPI: servicio de autenticación por petición y gate de autorización Bearer."""

import logging
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from auth_service.db import get_db
from auth_service.errors import TokenError, Unauthorized
from auth_service.repository import UserRepository
from auth_service.schemas import AuthContext
from auth_service.service import AuthService
from auth_service.tokens import TokenIssuer

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_auth_service(request: Request, db: Session = Depends(get_db)) -> AuthService:
    """Construye el AuthService con la sesión de la petición y los componentes compartidos de la app."""
    return AuthService(
        users=UserRepository(db),
        hasher=request.app.state.password_hasher,
        tokens=request.app.state.token_issuer,
    )


def require_auth(
    authorization: Optional[str] = Header(None),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthContext:
    """
    Gate de autorización para endpoints protegidos.

    Exige 'Authorization: Bearer <token>' y verifica el token. Cualquier fallo
    (cabecera ausente, mal formada, firma, algoritmo, expiración) se devuelve
    como el mismo Unauthorized; el motivo interno solo va al log.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise Unauthorized()

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise Unauthorized()

    try:
        payload = token_issuer.verify(token)
    except TokenError as e:
        logger.debug(f"Token rechazado ({type(e).__name__}): {e}")
        raise Unauthorized() from e

    try:
        user_id = int(payload.sub)
    except ValueError:
        logger.debug(f"Token con 'sub' no numérico: {payload.sub!r}")
        raise Unauthorized()
    if user_id <= 0:
        raise Unauthorized()

    return AuthContext(user_id=user_id, email=payload.email)
