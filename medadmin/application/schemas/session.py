"""Pydantic DTOs for sign-in, sign-up and the session header."""

from pydantic import BaseModel, Field

from medadmin.domain.entities import SessionSnapshot


class Credentials(BaseModel):
    """Email/password pair for sign-in and sign-up."""

    email: str = Field(..., min_length=3, max_length=255, examples=["admin@example.com"])
    password: str = Field(..., min_length=6, max_length=128)


class SessionResponse(BaseModel):
    authenticated: bool
    identity: str | None = None
    greeting: str | None = None

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot) -> "SessionResponse":
        greeting = None
        if snapshot.authenticated and snapshot.identity:
            greeting = f"Welcome, {snapshot.identity}"
        return cls(
            authenticated=snapshot.authenticated,
            identity=snapshot.identity,
            greeting=greeting,
        )
