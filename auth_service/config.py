"""Carga de configuración del servicio de autenticación desde variables de entorno (.env)."""

import os
import logging
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

DEFAULT_DB_PATH = "data/app.db"
DEFAULT_TOKEN_ISSUER = "auth-service"


class Settings(BaseModel):
    """Configuración inmutable del proceso. Se carga una sola vez al arrancar."""
    jwt_secret: str
    db_path: str = DEFAULT_DB_PATH
    database_url: Optional[str] = None
    token_issuer: str = DEFAULT_TOKEN_ISSUER
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: List[str] = []
    shutdown_grace_seconds: int = 5

    model_config = {"frozen": True}


def load_settings() -> Settings:
    """
    Carga las variables de entorno desde un archivo .env y construye la configuración.
    Lanza EnvironmentError si falta JWT_SECRET: el proceso no debe arrancar sin clave de firma.
    """
    load_dotenv()

    jwt_secret = os.getenv("JWT_SECRET")
    if not jwt_secret:
        msg = "Error Crítico: JWT_SECRET no está definida en las variables de entorno."
        logger.critical(msg)
        raise EnvironmentError(msg)

    cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

    try:
        port = int(os.getenv("PORT", 3000))
        grace = int(os.getenv("SHUTDOWN_GRACE_SECONDS", 5))
    except ValueError as e:
        raise EnvironmentError(f"Valor numérico inválido en la configuración: {e}") from e

    return Settings(
        jwt_secret=jwt_secret,
        db_path=os.getenv("DB_PATH") or DEFAULT_DB_PATH,
        database_url=os.getenv("DATABASE_URL") or None,
        token_issuer=os.getenv("TOKEN_ISSUER") or DEFAULT_TOKEN_ISSUER,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=cors_origins,
        shutdown_grace_seconds=grace,
    )


def setup_logging(level: str = "INFO") -> None:
    """Configura el logger raíz con el formato común de los servicios."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
