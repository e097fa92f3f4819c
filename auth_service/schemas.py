"""Modelos Pydantic (schemas) para validación de datos de entrada/salida en el Servicio de Autenticación."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

# --- Schemas de Registro / Login ---

class RegisterRequest(BaseModel):
    """Email y contraseña se validan en AuthService para devolver códigos de error propios."""
    email: str = ""
    password: str = ""


class RegisterResponse(BaseModel):
    id: int
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class LoginResponse(BaseModel):
    """Schema para el token de acceso JWT devuelto tras un login exitoso."""
    access_token: str
    token_type: str = "Bearer"
    expires_in: int


# --- Schemas de Perfil ---

class ProfileResponse(BaseModel):
    """Proyección pública del usuario (sin hash ni is_active)."""
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    membership_level: str
    membership_code: Optional[str] = None
    points: int
    joined_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdateRequest(BaseModel):
    """Actualización parcial: los campos ausentes (o null) no se tocan."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class MeResponse(BaseModel):
    id: int
    email: str
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# --- Schemas de Token ---

class TokenPayload(BaseModel):
    """Schema que representa el payload decodificado de un token JWT válido."""
    sub: str
    email: str
    iss: Optional[str] = None
    iat: Optional[int] = None
    exp: int


class AuthContext(BaseModel):
    """Identidad verificada que el gate de autorización entrega a los handlers."""
    user_id: int
    email: str

    model_config = ConfigDict(frozen=True)


# --- Schemas de Error / Salud ---

class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail


class HealthResponse(BaseModel):
    status: str
    service: str
    database: str
