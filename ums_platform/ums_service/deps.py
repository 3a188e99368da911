"""
FastAPI dependencies: wired components and the authentication gates.
"""
from typing import Optional

from fastapi import Depends, Header, Request

from .auth import Claim
from .services.registration import RegistrationService
from .services.sessions import SessionManager
from .utils.event_logger import AuthEventRecorder


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_registration_service(request: Request) -> RegistrationService:
    return request.app.state.registration_service


def get_event_recorder(request: Request) -> AuthEventRecorder:
    return request.app.state.event_recorder


def bearer_token(authorization: Optional[str] = Header(default=None, alias="Authorization")) -> str:
    """Raw token from the Authorization header; a `Bearer ` prefix is optional."""
    if not authorization:
        return ""
    token = authorization.strip()
    if token.lower().startswith("bearer "):
        token = token.split(" ", 1)[1].strip()
    return token


def require_access_claim(
    token: str = Depends(bearer_token),
    manager: SessionManager = Depends(get_session_manager),
) -> Claim:
    return manager.authenticate(token)


def require_refresh_claim(
    token: str = Depends(bearer_token),
    manager: SessionManager = Depends(get_session_manager),
) -> Claim:
    return manager.authenticate_refresh(token)
