"""
Token validation endpoint for other services.

Always answers 200; the outcome is carried in `message` and `data` is only
set when the token is backed by a live session.
"""
import logging

from fastapi import APIRouter, Depends

from ..deps import get_session_manager
from ..errors import UMSError
from ..schemas import TokenRequest, TokenResponse, UserData
from ..services.sessions import SessionManager

router = APIRouter(prefix="/rpc/v1/token-validation", tags=["token-validation"])
logger = logging.getLogger(__name__)


@router.post("/ValidateToken", response_model=TokenResponse)
def validate_token(payload: TokenRequest, manager: SessionManager = Depends(get_session_manager)):
    try:
        claim = manager.validate_token(payload.token)
    except UMSError as e:
        logger.error("Token validation failed: %s: %s", type(e).__name__, e)
        return TokenResponse(message=str(e))

    logger.debug("Token validated: user_id=%s", claim.user_id)
    return TokenResponse(
        message="success",
        data=UserData(user_id=claim.user_id, username=claim.username, full_name=claim.full_name),
    )
