"""Tests for the shared session lifecycle"""

import pytest
from sqlalchemy import text
from statement_gateway.infrastructure.database.session import session_scope


class TrackingSession:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


def test_session_scope_closes_session():
    sessions = []

    def factory():
        sessions.append(TrackingSession())
        return sessions[-1]

    with session_scope(factory) as db:
        assert db is sessions[0]
        assert not db.closed

    assert sessions[0].closed


def test_session_scope_closes_session_on_error():
    session = TrackingSession()

    with pytest.raises(RuntimeError):
        with session_scope(lambda: session):
            raise RuntimeError("handler failed")

    assert session.closed


def test_session_scope_opens_working_session(session_factory):
    with session_scope(session_factory) as db:
        assert db.execute(text("SELECT 1")).scalar() == 1
