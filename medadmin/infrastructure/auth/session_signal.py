"""Subscriber list shared by the authentication provider adapters."""

from medadmin.application.interfaces import SessionListener, Unsubscribe
from medadmin.domain.entities import SessionSnapshot


class SessionSignal:
    """Holds the current session state and pushes every change to subscribers.

    A new subscriber is called immediately with the current state.
    """

    def __init__(self) -> None:
        self._listeners: list[SessionListener] = []
        self._current = SessionSnapshot.signed_out()

    @property
    def current(self) -> SessionSnapshot:
        return self._current

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: SessionListener) -> Unsubscribe:
        self._listeners.append(listener)
        listener(self._current)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, snapshot: SessionSnapshot) -> None:
        self._current = snapshot
        for listener in list(self._listeners):
            listener(snapshot)
