"""Pruebas de la lógica de negocio de AuthService (sin capa HTTP)."""

import pytest
from sqlalchemy.exc import OperationalError

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

from conftest import TEST_PASSWORD


def register(auth_service, email="ana@example.com", password=TEST_PASSWORD):
    return auth_service.register(email, password)


# --- Registro ---

def test_register_returns_public_fields(auth_service, db_session):
    out = register(auth_service)

    assert out.id > 0
    assert out.email == "ana@example.com"
    assert out.created_at is not None
    assert not hasattr(out, "password_hash")

    stored = db_session.get(User, out.id)
    assert stored.password_hash != TEST_PASSWORD
    assert auth_service.hasher.verify(stored.password_hash, TEST_PASSWORD)
    assert stored.membership_level == "Bronze"
    assert stored.points == 0
    assert stored.is_active is True


@pytest.mark.parametrize("email", [
    "not-an-email",
    "",
    "ana@example",
    "ana@example.c",
    "@example.com",
    "ana@@example.com",
    "ana example@example.com",
    "ana@example.com\n",
    "añа@example.com",
])
def test_register_invalid_email(auth_service, email):
    with pytest.raises(InvalidEmail):
        register(auth_service, email=email)


@pytest.mark.parametrize("email", ["a.b+tag@sub.example.co", "USER_1%x@example.io"])
def test_register_accepts_valid_emails(auth_service, email):
    assert register(auth_service, email=email).email == email


def test_register_password_too_short(auth_service):
    with pytest.raises(PasswordTooShort):
        register(auth_service, password="1234567")


def test_register_password_exactly_minimum(auth_service):
    assert register(auth_service, password="12345678").id > 0


def test_register_same_email_twice(auth_service):
    register(auth_service)
    with pytest.raises(EmailExists):
        register(auth_service)


def test_register_unique_constraint_is_source_of_truth(auth_service, monkeypatch):
    """Si el pre-chequeo no ve al otro registro (carrera), el índice único lo rechaza igual."""
    register(auth_service)
    monkeypatch.setattr(auth_service.users, "count_by_email", lambda email: 0)

    with pytest.raises(EmailExists):
        register(auth_service)


# --- Login ---

def test_login_issues_bearer_token(auth_service, db_session):
    user = register(auth_service)
    out = auth_service.login("ana@example.com", TEST_PASSWORD)

    assert out.token_type == "Bearer"
    assert out.expires_in == 900
    payload = auth_service.tokens.verify(out.access_token)
    assert payload.sub == str(user.id)
    assert payload.email == "ana@example.com"

    assert db_session.get(User, user.id).last_login_at is not None


@pytest.mark.parametrize("email, password", [
    ("ana@example.com", "wrong-password"),
    ("nobody@example.com", TEST_PASSWORD),
    ("", TEST_PASSWORD),
    ("ana@example.com", ""),
    ("", ""),
])
def test_login_failures_are_indistinguishable(auth_service, email, password):
    register(auth_service)
    with pytest.raises(InvalidCredential) as exc_info:
        auth_service.login(email, password)
    assert exc_info.value.code == "INVALID_CREDENTIALS"
    assert exc_info.value.message == "invalid credentials"


def test_login_inactive_account_is_rejected(auth_service, db_session):
    user = register(auth_service)
    stored = db_session.get(User, user.id)
    stored.is_active = False
    db_session.commit()

    with pytest.raises(InvalidCredential):
        auth_service.login("ana@example.com", TEST_PASSWORD)


def test_login_survives_last_login_update_failure(auth_service, monkeypatch):
    register(auth_service)

    def broken_save(user):
        raise OperationalError("UPDATE users", {}, Exception("database is locked"))

    monkeypatch.setattr(auth_service.users, "save", broken_save)
    out = auth_service.login("ana@example.com", TEST_PASSWORD)
    assert out.access_token


# --- Perfil ---

def test_get_profile_projection(auth_service):
    user = register(auth_service)
    profile = auth_service.get_profile(user.id)

    assert profile.id == user.id
    assert profile.email == "ana@example.com"
    assert profile.first_name is None
    assert profile.membership_level == "Bronze"
    assert profile.points == 0
    dumped = profile.model_dump()
    assert "password_hash" not in dumped
    assert "is_active" not in dumped


def test_get_profile_missing_user(auth_service):
    with pytest.raises(UserNotFound):
        auth_service.get_profile(9999)


def test_update_profile_normalizes_phone(auth_service):
    user = register(auth_service)
    profile = auth_service.update_profile(user.id, phone="(555) 123-4567")
    assert profile.phone == "5551234567"


@pytest.mark.parametrize("phone", ["123", "", "555-123-45678", "(555) 123-456", "٥٥٥١٢٣٤٥٦٧"])
def test_update_profile_invalid_phone(auth_service, phone):
    user = register(auth_service)
    with pytest.raises(InvalidPhone):
        auth_service.update_profile(user.id, phone=phone)


def test_update_profile_trims_names(auth_service):
    user = register(auth_service)
    profile = auth_service.update_profile(user.id, first_name="  Ana ", last_name="\tGarcía\n")
    assert profile.first_name == "Ana"
    assert profile.last_name == "García"


@pytest.mark.parametrize("name", ["", "   ", "x" * 101])
def test_update_profile_invalid_name(auth_service, name):
    user = register(auth_service)
    with pytest.raises(InvalidName):
        auth_service.update_profile(user.id, first_name=name)
    with pytest.raises(InvalidName):
        auth_service.update_profile(user.id, last_name=name)


def test_update_profile_name_of_100_chars(auth_service):
    user = register(auth_service)
    assert auth_service.update_profile(user.id, last_name="y" * 100).last_name == "y" * 100


def test_update_profile_is_partial(auth_service):
    user = register(auth_service)
    auth_service.update_profile(user.id, first_name="Ana", last_name="García")

    profile = auth_service.update_profile(user.id, phone="555.987.6543")

    assert profile.first_name == "Ana"
    assert profile.last_name == "García"
    assert profile.phone == "5559876543"


def test_update_profile_invalid_field_changes_nothing(auth_service):
    user = register(auth_service)
    auth_service.update_profile(user.id, first_name="Ana")

    with pytest.raises(InvalidPhone):
        auth_service.update_profile(user.id, first_name="Beatriz", phone="123")

    assert auth_service.get_profile(user.id).first_name == "Ana"


def test_update_profile_missing_user(auth_service):
    with pytest.raises(UserNotFound):
        auth_service.update_profile(9999, first_name="Ana")


def test_me_reports_last_login(auth_service):
    user = register(auth_service)
    assert auth_service.me(user.id).last_login_at is None

    auth_service.login("ana@example.com", TEST_PASSWORD)
    me = auth_service.me(user.id)
    assert me.id == user.id
    assert me.email == "ana@example.com"
    assert me.last_login_at is not None
