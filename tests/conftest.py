import os
import itertools
import pytest
from datetime import datetime, timezone

# Set TESTING before any circulate imports
os.environ["TESTING"] = "true"
os.environ.setdefault("CIRCULATE_SECRET", "circulate-test-secret")

from fastapi.testclient import TestClient
from circulate.app import create_app
from circulate.core import auth, utils
from circulate.core.db import transaction
from circulate.schemas.member import Identity

T0 = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

_phones = itertools.count(5550000000)


class FrozenClock:
    """Stands in for `utcnow`; tests move `now` forward by hand."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    monkeypatch.setattr(utils, "PBKDF2_ITERATIONS", 1000)


@pytest.fixture
def app(tmp_path):
    # File backed so every worker thread sees the same database
    app = create_app(db_uri=f"sqlite:///{tmp_path / 'circulate.db'}")
    yield app
    app.state.engine.dispose()


@pytest.fixture
def sessions(app):
    return app.state.sessions


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def clock(app):
    clock = FrozenClock(T0)
    app.state.lending.clock = clock
    return clock


@pytest.fixture
def lending(app, clock):
    return app.state.lending


@pytest.fixture
def catalog(app):
    return app.state.catalog


@pytest.fixture
def make_member(sessions):
    def _make_member(username, password="secret123", admin=False):
        with transaction(sessions) as session:
            member = auth.signup(
                session, name=username.title(), username=username, password=password,
                email=f"{username}@example.org", phone=str(next(_phones)), admin=admin,
            )
        return member
    return _make_member


@pytest.fixture
def alice(make_member):
    return make_member("alice")


@pytest.fixture
def bob(make_member):
    return make_member("bob")


@pytest.fixture
def admin(make_member):
    return make_member("librarian", admin=True)


@pytest.fixture
def book(catalog):
    return catalog.add_book(name="Kindred", author="Octavia E. Butler", genre="Fiction", type="Paperback")


def identity_of(member):
    return Identity(id=member.id, username=member.username, admin=member.admin)


def bearer(member, **kwargs):
    return {"Authorization": f"Bearer {auth.create_token(member, **kwargs)}"}


@pytest.fixture
def as_identity():
    return identity_of


@pytest.fixture
def headers_for():
    return bearer
