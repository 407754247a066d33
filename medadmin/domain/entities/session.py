"""Domain value object for the authentication signal."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionSnapshot:
    """One emission of the authentication signal (also what readers get back)."""

    authenticated: bool = False
    identity: str | None = None

    @classmethod
    def signed_out(cls) -> "SessionSnapshot":
        return cls()
