"""
Unit tests for auth event recording.
"""
from unittest.mock import MagicMock, Mock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from ums_platform.ums_service.models import AuthEvent
from ums_platform.ums_service.utils.event_logger import AuthEventRecorder
from ums_platform.ums_platform_tests.helpers import login_user, register_user


@pytest.fixture
def mock_request():
    """Create a mock FastAPI Request object."""
    request = Mock()
    request.client = Mock()
    request.client.host = "192.168.1.1"
    request.headers = {"user-agent": "Mozilla/5.0 Test Browser"}
    return request


@pytest.fixture
def recorder(session_factory):
    return AuthEventRecorder(session_factory)


def all_events(session_factory):
    with session_factory() as db:
        return [event.to_dict() for event in db.query(AuthEvent).order_by(AuthEvent.timestamp).all()]


def test_record_creates_event(recorder, session_factory, alice, mock_request):
    recorder.record("login_success", "alice", mock_request, user_id=alice.id)

    events = all_events(session_factory)
    assert len(events) == 1
    assert events[0]["event_type"] == "login_success"
    assert events[0]["username"] == "alice"
    assert events[0]["user_id"] == alice.id
    assert events[0]["ip_address"] == "192.168.1.1"
    assert events[0]["user_agent"] == "Mozilla/5.0 Test Browser"
    assert events[0]["timestamp"] is not None
    assert events[0]["metadata"] == {}


def test_record_without_user_id(recorder, session_factory, mock_request):
    recorder.record("login_failure", "nobody", mock_request)

    events = all_events(session_factory)
    assert events[0]["user_id"] is None
    assert events[0]["username"] == "nobody"


def test_record_uses_forwarded_for_without_client(recorder, session_factory, mock_request):
    mock_request.client = None
    mock_request.headers = {"x-forwarded-for": "10.0.0.1, 172.16.0.1"}

    recorder.record("logout", "alice", mock_request)

    assert all_events(session_factory)[0]["ip_address"] == "10.0.0.1"


def test_record_rejects_unknown_event_type(recorder, mock_request):
    with pytest.raises(ValueError):
        recorder.record("2fa_success", "alice", mock_request)


def test_record_swallows_database_errors(mock_request):
    db = MagicMock()
    db.__enter__.return_value = db
    db.commit.side_effect = SQLAlchemyError("database is locked")
    recorder = AuthEventRecorder(lambda: db)

    recorder.record("login_success", "alice", mock_request, user_id=1)

    db.rollback.assert_called_once()


def test_api_records_login_events(client, app):
    register_user(client)
    login_user(client, password="wrongpassword")
    login_user(client)

    with app.state.session_factory() as db:
        types = [event.event_type for event in db.query(AuthEvent).all()]

    assert sorted(types) == ["login_failure", "login_success", "register"]


def test_events_never_contain_secrets(client, app):
    register_user(client)
    token = login_user(client).json()["data"]["token"]

    with app.state.session_factory() as db:
        dumped = repr([event.to_dict() for event in db.query(AuthEvent).all()])

    assert "secret123" not in dumped
    assert token not in dumped
