"""Endpoints HTTP del Auth Service: registro, login, identidad y perfil."""

import logging

from fastapi import APIRouter, Depends, status

from auth_service import schemas
from auth_service.dependencies import get_auth_service, require_auth
from auth_service.service import AuthService

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["Authentication"])
profile_router = APIRouter(prefix="/profile", tags=["Profile"])

ERROR_RESPONSES = {
    400: {"model": schemas.ErrorResponse},
    401: {"model": schemas.ErrorResponse},
    500: {"model": schemas.ErrorResponse},
}


# --- Endpoints públicos ---

@auth_router.post(
    "/register",
    response_model=schemas.RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**ERROR_RESPONSES, 409: {"model": schemas.ErrorResponse}},
)
def register(req: schemas.RegisterRequest, service: AuthService = Depends(get_auth_service)):
    """Registra un usuario nuevo con email y contraseña."""
    logger.info("Registro iniciado")
    return service.register(req.email, req.password)


@auth_router.post("/login", response_model=schemas.LoginResponse, responses=ERROR_RESPONSES)
def login(req: schemas.LoginRequest, service: AuthService = Depends(get_auth_service)):
    """Autentica al usuario y devuelve un token Bearer de 15 minutos."""
    return service.login(req.email, req.password)


# --- Endpoints protegidos ---

@auth_router.get("/me", response_model=schemas.MeResponse, responses=ERROR_RESPONSES)
def me(
    auth: schemas.AuthContext = Depends(require_auth),
    service: AuthService = Depends(get_auth_service),
):
    """Retorna la identidad del usuario autenticado."""
    return service.me(auth.user_id)


@profile_router.get("", response_model=schemas.ProfileResponse, responses=ERROR_RESPONSES)
def get_profile(
    auth: schemas.AuthContext = Depends(require_auth),
    service: AuthService = Depends(get_auth_service),
):
    """Retorna el perfil público del usuario autenticado."""
    return service.get_profile(auth.user_id)


@profile_router.put("", response_model=schemas.ProfileResponse, responses=ERROR_RESPONSES)
def update_profile(
    req: schemas.ProfileUpdateRequest,
    auth: schemas.AuthContext = Depends(require_auth),
    service: AuthService = Depends(get_auth_service),
):
    """Actualiza nombre, apellido y/o teléfono. Los campos ausentes no se modifican."""
    logger.info(f"Actualización de perfil para user_id {auth.user_id}")
    return service.update_profile(
        auth.user_id,
        first_name=req.first_name,
        last_name=req.last_name,
        phone=req.phone,
    )
