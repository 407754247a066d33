"""Firebase Authentication over the Identity Toolkit REST API — implements AuthProvider."""

import logging
from typing import Any

import httpx

from medadmin.application.interfaces import AuthProvider, SessionListener, Unsubscribe
from medadmin.domain.entities import SessionSnapshot
from medadmin.domain.exceptions import AuthError
from medadmin.infrastructure.auth.session_signal import SessionSignal

logger = logging.getLogger(__name__)

_MESSAGES = {
    "EMAIL_NOT_FOUND": "No account exists for this email",
    "INVALID_PASSWORD": "The password is invalid",
    "INVALID_LOGIN_CREDENTIALS": "The email or password is invalid",
    "USER_DISABLED": "This account has been disabled",
    "EMAIL_EXISTS": "An account already exists for this email",
    "INVALID_EMAIL": "The email address is badly formatted",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts, try again later",
}


class FirebaseAuthProvider(AuthProvider):
    """Infrastructure adapter — email/password sessions against Firebase Auth.

    Holds the ID token of the signed-in user for the store adapters.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://identitytoolkit.googleapis.com/v1",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._http_client = http_client
        self._timeout = timeout
        self._signal = SessionSignal()
        self._id_token: str | None = None

    @property
    def id_token(self) -> str | None:
        return self._id_token

    def subscribe(self, listener: SessionListener) -> Unsubscribe:
        return self._signal.subscribe(listener)

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _call(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        client = await self._get_client()
        should_close = self._http_client is None
        try:
            response = await client.post(
                f"{self._base_url}/accounts:{endpoint}",
                params={"key": self._api_key},
                json=payload,
            )
        except httpx.HTTPError as exc:
            raise AuthError("NETWORK_ERROR", f"{type(exc).__name__}: {exc}") from exc
        finally:
            if should_close:
                await client.aclose()

        if response.status_code != 200:
            self._raise_auth_error(response)
        return response.json()

    @staticmethod
    def _raise_auth_error(response: httpx.Response) -> None:
        try:
            raw = response.json().get("error", {}).get("message", "")
        except (ValueError, AttributeError):
            raw = ""
        code = raw.split(" : ", 1)[0].strip() or f"HTTP_{response.status_code}"
        detail = raw.split(" : ", 1)[1] if " : " in raw else _MESSAGES.get(code, code)
        logger.warning("Firebase auth rejected request: %s", code)
        raise AuthError(code, detail)

    def _start_session(self, data: dict[str, Any]) -> SessionSnapshot:
        self._id_token = data.get("idToken")
        snapshot = SessionSnapshot(authenticated=True, identity=data.get("email"))
        self._signal.emit(snapshot)
        return snapshot

    async def sign_in(self, email: str, password: str) -> SessionSnapshot:
        data = await self._call(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._start_session(data)

    async def sign_up(self, email: str, password: str) -> SessionSnapshot:
        data = await self._call(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._start_session(data)

    async def sign_out(self) -> None:
        self._id_token = None
        self._signal.emit(SessionSnapshot.signed_out())
