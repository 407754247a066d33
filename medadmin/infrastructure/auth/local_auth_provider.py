"""In-process authentication for the local development backend."""

import hmac

from medadmin.application.interfaces import AuthProvider, SessionListener, Unsubscribe
from medadmin.domain.entities import SessionSnapshot
from medadmin.domain.exceptions import AuthError
from medadmin.infrastructure.auth.session_signal import SessionSignal


class LocalAuthProvider(AuthProvider):
    """Accounts held in memory, seeded with the configured admin account."""

    def __init__(self, accounts: dict[str, str] | None = None):
        self._accounts: dict[str, str] = {
            email.lower(): password for email, password in (accounts or {}).items()
        }
        self._signal = SessionSignal()
        self._token: str | None = None

    @property
    def id_token(self) -> str | None:
        return self._token

    def subscribe(self, listener: SessionListener) -> Unsubscribe:
        return self._signal.subscribe(listener)

    async def sign_in(self, email: str, password: str) -> SessionSnapshot:
        expected = self._accounts.get(email.lower())
        if expected is None or not hmac.compare_digest(expected.encode(), password.encode()):
            raise AuthError("INVALID_LOGIN_CREDENTIALS", "The email or password is invalid")
        return self._start_session(email)

    async def sign_up(self, email: str, password: str) -> SessionSnapshot:
        key = email.lower()
        if key in self._accounts:
            raise AuthError("EMAIL_EXISTS", "An account already exists for this email")
        self._accounts[key] = password
        return self._start_session(email)

    async def sign_out(self) -> None:
        self._token = None
        self._signal.emit(SessionSnapshot.signed_out())

    def _start_session(self, email: str) -> SessionSnapshot:
        self._token = f"local:{email.lower()}"
        snapshot = SessionSnapshot(authenticated=True, identity=email)
        self._signal.emit(snapshot)
        return snapshot
