"""
Shared fixtures: in-memory database, wired services and a test application.
"""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from ums_platform.ums_service.auth import PasswordVerifier, TokenCodec, TokenConfig
from ums_platform.ums_service.config import Settings
from ums_platform.ums_service.db import build_engine, build_session_factory, init_db
from ums_platform.ums_service.main import create_app
from ums_platform.ums_service.models import User
from ums_platform.ums_service.repository import SqlAlchemyCredentialStore
from ums_platform.ums_service.services.registration import RegistrationService
from ums_platform.ums_service.services.sessions import SessionManager
from ums_platform.ums_platform_tests.helpers import FakeClock, FakeWalletClient

SECRET_KEY = "test-secret-key-0123456789abcdef0123456789"
ACCESS_MINUTES = 180
REFRESH_MINUTES = 4320


@pytest.fixture
def token_config():
    return TokenConfig(
        signing_key=SECRET_KEY,
        access_duration=timedelta(minutes=ACCESS_MINUTES),
        refresh_duration=timedelta(minutes=REFRESH_MINUTES),
    )


@pytest.fixture
def codec(token_config):
    return TokenCodec(token_config)


@pytest.fixture
def verifier():
    return PasswordVerifier()


@pytest.fixture
def engine():
    engine = build_engine("sqlite:///:memory:")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def store(session_factory):
    return SqlAlchemyCredentialStore(session_factory)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(store, codec, verifier, clock):
    return SessionManager(store, codec, verifier, clock=clock)


@pytest.fixture
def wallet_client():
    return FakeWalletClient()


@pytest.fixture
def registration(store, verifier, wallet_client):
    return RegistrationService(store, verifier, wallet_client)


@pytest.fixture
def alice(store, verifier):
    """Registered account alice / secret123."""
    return store.insert_user(
        User(
            username="alice",
            email="alice@x.com",
            full_name="Alice Liddell",
            password=verifier.hash("secret123"),
        )
    )


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite:///:memory:",
        SECRET_KEY=SECRET_KEY,
        ACCESS_TOKEN_EXPIRE_MINUTES=ACCESS_MINUTES,
        REFRESH_TOKEN_EXPIRE_MINUTES=REFRESH_MINUTES,
        WALLET_HOST="http://wallet.test",
    )


@pytest.fixture
def app(settings, wallet_client):
    return create_app(settings, wallet_client=wallet_client)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
