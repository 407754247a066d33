"""Login, sign-up and session header endpoints — reachable without a session."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from medadmin.application.interfaces import AuthProvider
from medadmin.application.schemas import Credentials, SessionResponse
from medadmin.application.services import SessionGate
from medadmin.domain.exceptions import AuthError
from medadmin.infrastructure.dependencies import (
    ConsoleState,
    get_auth_provider,
    get_console_state,
    get_session_gate,
)
from medadmin.presentation.api.errors import to_http_exception

router = APIRouter(tags=["Session"])


@router.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse(url="/login", status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get("/login", response_model=SessionResponse)
async def login_view(gate: SessionGate = Depends(get_session_gate)) -> SessionResponse:
    """Current session state, shown by the login view."""
    return SessionResponse.from_snapshot(gate.snapshot())


@router.post("/login", response_model=SessionResponse)
async def login(
    credentials: Credentials,
    provider: AuthProvider = Depends(get_auth_provider),
    gate: SessionGate = Depends(get_session_gate),
) -> SessionResponse:
    """Sign in with email and password."""
    try:
        await provider.sign_in(credentials.email, credentials.password)
    except AuthError as e:
        raise to_http_exception(e)
    return SessionResponse.from_snapshot(gate.snapshot())


@router.post("/signup", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    credentials: Credentials,
    provider: AuthProvider = Depends(get_auth_provider),
    gate: SessionGate = Depends(get_session_gate),
) -> SessionResponse:
    """Create a staff account and sign it in."""
    try:
        await provider.sign_up(credentials.email, credentials.password)
    except AuthError as e:
        raise to_http_exception(e)
    return SessionResponse.from_snapshot(gate.snapshot())


@router.post("/logout", response_model=SessionResponse)
async def logout(
    state: ConsoleState = Depends(get_console_state),
) -> SessionResponse:
    """Sign out and tear down the protected views."""
    await state.adapters.auth_provider.sign_out()
    state.inventory.unmount()
    state.orders.unmount()
    return SessionResponse.from_snapshot(state.gate.snapshot())


@router.get("/session", response_model=SessionResponse)
async def session_header(gate: SessionGate = Depends(get_session_gate)) -> SessionResponse:
    """Header data: the signed-in identity, if any."""
    return SessionResponse.from_snapshot(gate.snapshot())
