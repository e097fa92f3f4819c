"""Jerarquía de errores del servicio de autenticación.

Cada error de negocio lleva su código público y el status HTTP con el que se
expone; los handlers de la app solo tienen que leer esos atributos.
"""

from fastapi import status


class ServiceError(Exception):
    """Error base con representación pública {error: {code, message}}."""
    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "internal error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


# --- Errores de validación (400) ---

class ValidationError(ServiceError):
    code = "INVALID_PAYLOAD"
    status_code = status.HTTP_400_BAD_REQUEST
    message = "invalid payload"


class InvalidEmail(ValidationError):
    code = "INVALID_EMAIL"
    message = "invalid email"


class PasswordTooShort(ValidationError):
    code = "PASSWORD_TOO_SHORT"
    message = "password too short"


class InvalidName(ValidationError):
    code = "INVALID_NAME"
    message = "invalid name"


class InvalidPhone(ValidationError):
    code = "INVALID_PHONE"
    message = "invalid phone"


# --- Conflictos (409) ---

class EmailExists(ServiceError):
    code = "EMAIL_EXISTS"
    status_code = status.HTTP_409_CONFLICT
    message = "email already registered"


# --- Autenticación (401) ---

class AuthenticationError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class InvalidCredential(AuthenticationError):
    code = "INVALID_CREDENTIALS"
    message = "invalid credentials"


class Unauthorized(AuthenticationError):
    code = "UNAUTHORIZED"
    message = "missing or invalid token"


# --- Errores internos (500) ---

class UserNotFound(ServiceError):
    """El perfil solo se consulta tras autorizar, así que su ausencia es una inconsistencia de datos."""
    message = "internal error"


class StorageError(ServiceError):
    message = "internal error"


# --- Hasher ---

class EmptyInput(ValueError):
    """Se intentó hashear una contraseña vacía."""


# --- Tokens (nunca se exponen tal cual: el gate los colapsa en Unauthorized) ---

class TokenError(Exception):
    pass


class MalformedToken(TokenError):
    pass


class UnexpectedSigningAlgorithm(TokenError):
    pass


class InvalidSignature(TokenError):
    pass


class Expired(TokenError):
    pass
