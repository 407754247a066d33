"""Unit tests for the SessionGate and the session signal it subscribes to."""

import pytest

from medadmin.application.services import SessionGate
from medadmin.domain.entities import SessionSnapshot
from medadmin.domain.exceptions import AuthError
from medadmin.infrastructure.auth.local_auth_provider import LocalAuthProvider
from medadmin.infrastructure.auth.session_signal import SessionSignal


@pytest.fixture
def provider() -> LocalAuthProvider:
    return LocalAuthProvider({"Admin@Example.com": "secret123"})


@pytest.fixture
def gate(provider) -> SessionGate:
    gate = SessionGate()
    gate.start(provider)
    yield gate
    gate.stop()


def test_signed_out_before_any_signal():
    gate = SessionGate()
    assert gate.is_authenticated is False
    assert gate.identity is None
    assert gate.started is False


async def test_follows_sign_in_and_sign_out(gate, provider):
    assert gate.is_authenticated is False

    await provider.sign_in("admin@example.com", "secret123")
    assert gate.is_authenticated is True
    assert gate.identity == "admin@example.com"

    await provider.sign_out()
    assert gate.snapshot() == SessionSnapshot.signed_out()


async def test_rejected_sign_in_leaves_gate_signed_out(gate, provider):
    with pytest.raises(AuthError):
        await provider.sign_in("admin@example.com", "wrong-password")
    assert gate.is_authenticated is False


async def test_gate_started_after_sign_in_sees_current_session(provider):
    await provider.sign_in("admin@example.com", "secret123")

    gate = SessionGate()
    gate.start(provider)

    assert gate.is_authenticated is True
    gate.stop()


def test_start_twice_is_an_error(gate, provider):
    with pytest.raises(RuntimeError):
        gate.start(provider)


async def test_stop_unsubscribes(provider):
    signal_gate = SessionGate()
    signal_gate.start(provider)
    signal_gate.stop()

    await provider.sign_in("admin@example.com", "secret123")

    assert signal_gate.is_authenticated is False
    assert signal_gate.started is False


def test_signal_replays_current_state_and_unsubscribes():
    signal = SessionSignal()
    seen: list[SessionSnapshot] = []

    unsubscribe = signal.subscribe(seen.append)
    signal.emit(SessionSnapshot(authenticated=True, identity="a@b.c"))
    unsubscribe()
    signal.emit(SessionSnapshot.signed_out())

    assert seen == [SessionSnapshot.signed_out(), SessionSnapshot(authenticated=True, identity="a@b.c")]
    assert signal.listener_count == 0
