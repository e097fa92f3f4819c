"""Punto de entrada del Auth Service: carga configuración, arranca uvicorn y apaga de forma ordenada."""

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn

from auth_service.config import load_settings, setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="auth-service", description="User authentication and profile API.")
    parser.add_argument("--host", help="Bind address (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Bind port (default: PORT or 3000)")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    return parser.parse_args(argv)


def run(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    try:
        settings = load_settings()
    except EnvironmentError as e:
        # Sin clave de firma el servicio no puede arrancar
        logging.basicConfig(level=logging.ERROR)
        logger.critical(f"No se pudo iniciar el Auth Service: {e}")
        sys.exit(1)

    setup_logging(settings.log_level)

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info(f"Iniciando Auth Service en {host}:{port}")

    # uvicorn deja de aceptar conexiones en SIGINT/SIGTERM y espera a las peticiones en curso
    uvicorn.run(
        "auth_service.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload,
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
        log_level=settings.log_level.lower(),
    )
    logger.info("Server stopped")


if __name__ == "__main__":
    run()
