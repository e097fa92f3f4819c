"""Configuración de la conexión a la base de datos usando SQLAlchemy para el Auth Service."""

import os
import logging
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, exc, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from auth_service.errors import StorageError

logger = logging.getLogger(__name__)

# Crea una clase base (Base) para los modelos declarativos
Base = declarative_base()


def build_database_url(db_path: str, database_url: Optional[str] = None) -> str:
    """DATABASE_URL tiene prioridad; si no, se usa un archivo SQLite local en db_path."""
    if database_url:
        return database_url
    return f"sqlite:///{db_path}"


def create_db_engine(database_url: str) -> Engine:
    """Crea el engine. connect_args solo es necesario para SQLite multihilo."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Crea el directorio del archivo SQLite (si aplica) y las tablas si no existen."""
    # Registra los modelos en Base.metadata
    from auth_service import models  # noqa: F401

    db_file = engine.url.database if engine.url.get_backend_name() == "sqlite" else None
    if db_file and db_file != ":memory:":
        directory = os.path.dirname(db_file)
        if directory:
            os.makedirs(directory, exist_ok=True)

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialized at {engine.url.render_as_string(hide_password=True)}")


def check_db_connection(engine: Engine) -> bool:
    """Verifica que la base de datos responda."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except exc.SQLAlchemyError as e:
        logger.warning(f"Database health check failed: {e}")
        return False


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependencia de FastAPI: abre una sesión por petición usando la fábrica
    guardada en app.state y la cierra al terminar.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    except exc.SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error de base de datos durante la petición: {e}", exc_info=True)
        raise StorageError() from e
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
