"""Hash y verificación de contraseñas con bcrypt."""

import logging

import bcrypt

from auth_service.errors import EmptyInput

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12

# bcrypt solo usa los primeros 72 bytes del secreto.
BCRYPT_MAX_BYTES = 72


def _encode(secret: str) -> bytes:
    return secret.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Hash adaptativo con sal (bcrypt) y verificación en tiempo constante."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Genera el hash bcrypt de una contraseña plana. Lanza EmptyInput si está vacía."""
        if not password:
            raise EmptyInput("empty password")
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, hashed_password: str, password: str) -> bool:
        """
        Verifica una contraseña plana contra un hash almacenado.

        Nunca lanza: entradas vacías, hashes con formato desconocido o
        contraseñas incorrectas devuelven False.
        """
        if not hashed_password or not password:
            return False
        try:
            return bcrypt.checkpw(_encode(password), hashed_password.encode("utf-8"))
        except (ValueError, TypeError) as e:
            logger.warning(f"Hash almacenado con formato inválido: {e}")
            return False
