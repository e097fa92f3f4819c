"""
Configuraciones y fixtures compartidos para las pruebas automatizadas con pytest.
Cada prueba usa una app construida sobre un archivo SQLite temporal.
"""

import uuid

import pytest
from fastapi.testclient import TestClient

from auth_service.app import create_app
from auth_service.config import Settings
from auth_service.db import create_db_engine, create_session_factory, init_db
from auth_service.password import PasswordHasher
from auth_service.repository import UserRepository
from auth_service.service import AuthService
from auth_service.tokens import TokenIssuer

JWT_SECRET = "test-secret-key-for-auth-service"
TOKEN_ISSUER = "auth-service-tests"
TEST_PASSWORD = "password123"

# Coste bajo para que las pruebas no tarden; el coste real (12) se prueba en test_password.py
FAST_ROUNDS = 4


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        jwt_secret=JWT_SECRET,
        db_path=str(tmp_path / "data" / "test.db"),
        token_issuer=TOKEN_ISSUER,
    )


@pytest.fixture
def app(settings):
    return create_app(settings, password_hasher=PasswordHasher(rounds=FAST_ROUNDS))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer(JWT_SECRET, TOKEN_ISSUER)


@pytest.fixture
def db_session(tmp_path):
    """Sesión directa a una base temporal, para probar el servicio sin HTTP."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'service.db'}")
    init_db(engine)
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def auth_service(db_session, token_issuer) -> AuthService:
    return AuthService(UserRepository(db_session), PasswordHasher(rounds=FAST_ROUNDS), token_issuer)


def unique_email() -> str:
    return f"testuser_{uuid.uuid4().hex[:12]}@example.com"


@pytest.fixture
def test_user(client):
    """Registra un usuario único e inicia sesión. Devuelve email, password, id y token."""
    email = unique_email()
    r_register = client.post("/api/v1/auth/register", json={"email": email, "password": TEST_PASSWORD})
    assert r_register.status_code == 201, r_register.text

    r_login = client.post("/api/v1/auth/login", json={"email": email, "password": TEST_PASSWORD})
    assert r_login.status_code == 200, r_login.text

    return {
        "email": email,
        "password": TEST_PASSWORD,
        "user_id": r_register.json()["id"],
        "token": r_login.json()["access_token"],
    }


@pytest.fixture
def auth_headers(test_user):
    """Cabeceras de autorización Bearer del usuario de prueba."""
    return {"Authorization": f"Bearer {test_user['token']}"}
