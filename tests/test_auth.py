import jwt
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch
from circulate.core import auth
from circulate.core.db import transaction
from circulate.core.exceptions import (
    ForbiddenError,
    InvalidCredentialsError,
    MemberExistsError,
)
from circulate.core.models import Member
from circulate.core.utils import hash_password, verify_password
from circulate.schemas.member import Identity


class Reader:
    id = 7
    username = "reader"
    admin = False


def test_token_roundtrip():
    """Token carries id, username and role flag"""
    identity = auth.verify_token(auth.create_token(Reader))
    assert identity == Identity(id=7, username="reader", admin=False)


def test_token_expires_after_an_hour():
    token = auth.create_token(Reader)
    claims = jwt.decode(token, options={"verify_signature": False})
    assert claims["exp"] - claims["iat"] == 3600


def test_expired_token_is_forbidden():
    token = auth.create_token(Reader, now=datetime.now(timezone.utc) - timedelta(minutes=61))
    with pytest.raises(ForbiddenError):
        auth.verify_token(token)


def test_token_signed_with_other_secret_is_forbidden():
    with patch.object(auth, "SECRET", "not-the-real-secret"):
        token = auth.create_token(Reader)
    with pytest.raises(ForbiddenError):
        auth.verify_token(token)


def test_token_without_username_is_forbidden():
    now = datetime.now(timezone.utc)
    token = jwt.encode({
        "iss": auth.ISSUER, "aud": auth.AUDIENCE, "sub": "7", "id": 7,
        "iat": now, "exp": now + timedelta(minutes=5),
    }, auth.SECRET, algorithm=auth.ALGORITHM)
    with pytest.raises(ForbiddenError):
        auth.verify_token(token)


def test_missing_secret_refuses_to_sign():
    with patch.object(auth, "SECRET", None):
        with pytest.raises(RuntimeError):
            auth.create_token(Reader)


def test_authorize_self_and_admin():
    member = Identity(id=1, username="alice")
    auth.authorize_self(member, "alice")
    with pytest.raises(ForbiddenError):
        auth.authorize_self(member, "bob")
    with pytest.raises(ForbiddenError):
        auth.authorize_admin(member)
    auth.authorize_admin(Identity(id=2, username="librarian", admin=True))


def test_password_hashing_is_salted():
    first, second = hash_password("secret123"), hash_password("secret123")
    assert first != second
    assert verify_password("secret123", first)
    assert not verify_password("secret124", first)
    assert not verify_password("secret123", "garbage")


def test_signup_and_signin(sessions):
    with transaction(sessions) as session:
        auth.signup(session, name="Alice", username="alice", password="secret123",
                    email=" Alice@Example.org ", phone="5551234567")
    with transaction(sessions) as session:
        stored = Member.by_username(session, "alice")
        assert stored.email == "alice@example.org"
        assert stored.password_hash != "secret123"
        token, member = auth.signin(session, "alice", "secret123")
    assert auth.verify_token(token).username == "alice"
    assert member.admin is False


@pytest.mark.parametrize("username, email, phone", [
    ("alice", "other@example.org", "5550000001"),
    ("other", "alice@example.org", "5550000002"),
    ("other", "other@example.org", "5551234567"),
])
def test_signup_requires_unique_contact_fields(sessions, username, email, phone):
    with transaction(sessions) as session:
        auth.signup(session, name="Alice", username="alice", password="secret123",
                    email="alice@example.org", phone="5551234567")
    with pytest.raises(MemberExistsError):
        with transaction(sessions) as session:
            auth.signup(session, name="Other", username=username, password="secret123",
                        email=email, phone=phone)


def test_signin_rejects_bad_credentials(sessions, alice):
    with transaction(sessions) as session:
        with pytest.raises(InvalidCredentialsError):
            auth.signin(session, "alice", "wrong-password")
        with pytest.raises(InvalidCredentialsError):
            auth.signin(session, "nobody", "secret123")
