"""Abstract authentication provider interface (port)."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from medadmin.domain.entities import SessionSnapshot

SessionListener = Callable[[SessionSnapshot], None]
Unsubscribe = Callable[[], None]


class AuthProvider(ABC):
    """Port for the authentication/session provider.

    Emits a :class:`SessionSnapshot` to every subscriber on each session
    change; a new subscriber immediately receives the current state.
    """

    @abstractmethod
    def subscribe(self, listener: SessionListener) -> Unsubscribe:
        """Register ``listener`` and return a callable that removes it."""
        ...

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> SessionSnapshot:
        """Sign in with email and password. Raises ``AuthError`` on rejection."""
        ...

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> SessionSnapshot:
        """Create an account and sign it in. Raises ``AuthError`` on rejection."""
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        ...

    @property
    @abstractmethod
    def id_token(self) -> str | None:
        """Bearer token of the active session, if any."""
        ...
