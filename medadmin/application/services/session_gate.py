"""Process-wide answer to "is a session active?", fed by the authentication signal."""

import logging

from medadmin.application.interfaces import AuthProvider, Unsubscribe
from medadmin.domain.entities import SessionSnapshot

logger = logging.getLogger(__name__)


class SessionGate:
    """Tracks the authentication signal for the lifetime of the application.

    Subscribes once in :meth:`start` and unsubscribes in :meth:`stop`.
    Readers get a snapshot; they never change the gate's state. The gate
    holds no protected data and performs no redirects.
    """

    def __init__(self) -> None:
        self._snapshot = SessionSnapshot.signed_out()
        self._unsubscribe: Unsubscribe | None = None

    def start(self, provider: AuthProvider) -> None:
        if self._unsubscribe is not None:
            raise RuntimeError("SessionGate is already subscribed")
        self._unsubscribe = provider.subscribe(self._on_signal)
        logger.debug("SessionGate subscribed to %s", type(provider).__name__)

    def stop(self) -> None:
        if self._unsubscribe is None:
            return
        self._unsubscribe()
        self._unsubscribe = None
        self._snapshot = SessionSnapshot.signed_out()
        logger.debug("SessionGate unsubscribed")

    @property
    def started(self) -> bool:
        return self._unsubscribe is not None

    @property
    def is_authenticated(self) -> bool:
        return self._snapshot.authenticated

    @property
    def identity(self) -> str | None:
        return self._snapshot.identity

    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    def _on_signal(self, snapshot: SessionSnapshot) -> None:
        self._snapshot = SessionSnapshot(
            authenticated=snapshot.authenticated,
            identity=snapshot.identity if snapshot.authenticated else None,
        )
        logger.info(
            "Session %s%s",
            "active" if snapshot.authenticated else "ended",
            f" for {snapshot.identity}" if snapshot.authenticated and snapshot.identity else "",
        )
