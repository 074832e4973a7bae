"""Tests for session resolution."""

import pytest

from recipe_journal.services.auth import AuthenticationError, SessionGate
from tests.conftest import FakeAuthGateway


class BrokenAuthGateway(FakeAuthGateway):
    def get_user(self, access_token: str):
        raise RuntimeError("auth provider unreachable")

    def sign_out(self, access_token: str) -> None:
        raise RuntimeError("auth provider unreachable")


def test_current_user_resolves_valid_token() -> None:
    gateway = FakeAuthGateway()
    user = gateway.register("cook@example.com", "secret")
    token = gateway.issue_token(user)

    assert SessionGate(gateway).current_user(token) == user


@pytest.mark.parametrize("token", [None, "", "unknown-token"])
def test_current_user_without_valid_session(token) -> None:
    assert SessionGate(FakeAuthGateway()).current_user(token) is None


def test_current_user_treats_provider_errors_as_signed_out() -> None:
    assert SessionGate(BrokenAuthGateway()).current_user("token") is None


def test_sign_in_returns_session() -> None:
    gateway = FakeAuthGateway()
    user = gateway.register("cook@example.com", "secret")

    session = SessionGate(gateway).sign_in(" cook@example.com ", "secret")

    assert session.user == user
    assert gateway.get_user(session.access_token) == user


@pytest.mark.parametrize(
    ("email", "password"),
    [("cook@example.com", "wrong"), ("", "secret"), ("cook@example.com", "")],
)
def test_sign_in_rejects_bad_credentials(email, password) -> None:
    gateway = FakeAuthGateway()
    gateway.register("cook@example.com", "secret")

    with pytest.raises(AuthenticationError):
        SessionGate(gateway).sign_in(email, password)


def test_sign_out_revokes_token() -> None:
    gateway = FakeAuthGateway()
    token = gateway.issue_token(gateway.register("cook@example.com", "secret"))
    gate = SessionGate(gateway)

    gate.sign_out(token)
    gate.sign_out(None)

    assert gateway.signed_out == [token]
    assert gate.current_user(token) is None


def test_sign_out_ignores_provider_errors() -> None:
    SessionGate(BrokenAuthGateway()).sign_out("token")


def test_expired_session_is_renewed_with_refresh_token() -> None:
    gateway = FakeAuthGateway()
    session = gateway.issue_session(gateway.register("cook@example.com", "secret"))
    gateway.expire(session.access_token)
    gate = SessionGate(gateway)

    assert gate.current_user(session.access_token) is None

    renewed = gate.refresh(session.refresh_token)

    assert renewed is not None
    assert renewed.user == session.user
    assert renewed.refresh_token != session.refresh_token
    assert gate.current_user(renewed.access_token) == session.user


@pytest.mark.parametrize("token", [None, "", "refresh-unknown"])
def test_refresh_without_valid_refresh_token(token) -> None:
    assert SessionGate(FakeAuthGateway()).refresh(token) is None


def test_refresh_token_is_single_use() -> None:
    gateway = FakeAuthGateway()
    session = gateway.issue_session(gateway.register("cook@example.com", "secret"))
    gate = SessionGate(gateway)

    assert gate.refresh(session.refresh_token) is not None
    assert gate.refresh(session.refresh_token) is None
