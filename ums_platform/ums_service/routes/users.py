"""
User API: registration, login, logout and access token refresh.
"""
import logging

from fastapi import APIRouter, Depends, Request

from ..auth import Claim
from ..deps import (
    bearer_token,
    get_event_recorder,
    get_registration_service,
    get_session_manager,
    require_access_claim,
    require_refresh_claim,
)
from ..errors import AccountNotFound, InvalidCredentials
from ..schemas import Envelope, LoginData, LoginRequest, RefreshTokenData, RegisterData, RegisterRequest
from ..services.registration import RegistrationService
from ..services.sessions import SessionManager
from ..utils.event_logger import AuthEventRecorder

SUCCESS_MESSAGE = "success"

router = APIRouter(prefix="/user/v1", tags=["users"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=Envelope)
def register(
    payload: RegisterRequest,
    request: Request,
    service: RegistrationService = Depends(get_registration_service),
    events: AuthEventRecorder = Depends(get_event_recorder),
):
    result = service.register(payload.username, payload.email, payload.full_name, payload.password)
    events.record("register", result.username, request, user_id=result.user_id,
                  metadata={"wallet_provisioned": result.wallet is not None})
    return Envelope(message=SUCCESS_MESSAGE, data=RegisterData.model_validate(result))


@router.post("/login", response_model=Envelope)
def login(
    credentials: LoginRequest,
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
    events: AuthEventRecorder = Depends(get_event_recorder),
):
    try:
        result = manager.login(credentials.username, credentials.password)
    except (AccountNotFound, InvalidCredentials):
        events.record("login_failure", credentials.username, request)
        raise

    events.record("login_success", result.username, request, user_id=result.user_id)
    return Envelope(message=SUCCESS_MESSAGE, data=LoginData.model_validate(result))


@router.delete("/logout", response_model=Envelope)
def logout(
    request: Request,
    claim: Claim = Depends(require_access_claim),
    token: str = Depends(bearer_token),
    manager: SessionManager = Depends(get_session_manager),
    events: AuthEventRecorder = Depends(get_event_recorder),
):
    manager.logout(token)
    events.record("logout", claim.username, request, user_id=claim.user_id)
    return Envelope(message=SUCCESS_MESSAGE)


@router.put("/refresh-token", response_model=Envelope)
def refresh_token(
    request: Request,
    claim: Claim = Depends(require_refresh_claim),
    token: str = Depends(bearer_token),
    manager: SessionManager = Depends(get_session_manager),
    events: AuthEventRecorder = Depends(get_event_recorder),
):
    result = manager.refresh_token(token, claim)
    events.record("token_refresh", claim.username, request, user_id=claim.user_id)
    return Envelope(message=SUCCESS_MESSAGE, data=RefreshTokenData.model_validate(result))
