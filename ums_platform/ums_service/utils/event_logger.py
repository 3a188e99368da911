"""
Event logger utility for authentication events.
"""
from datetime import datetime, timezone
import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..models import AuthEvent

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "register",
    "login_success",
    "login_failure",
    "logout",
    "token_refresh",
}


def client_ip(request: Request) -> Optional[str]:
    """Client address, falling back to the first X-Forwarded-For entry."""
    ip_address = None
    if request.client:
        ip_address = request.client.host

    # Check for X-Forwarded-For header (proxy/load balancer scenarios)
    if not ip_address and request.headers.get("x-forwarded-for"):
        ip_address = request.headers.get("x-forwarded-for").split(",")[0].strip()

    return ip_address


class AuthEventRecorder:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def record(
        self,
        event_type: str,
        username: str,
        request: Request,
        user_id: Optional[int] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        """
        Log an authentication event to the database and the service log.

        Args:
            event_type: One of: register, login_success, login_failure,
                        logout, token_refresh
            username: Username the event is about
            request: FastAPI Request object
            user_id: Account id, if known
            metadata: Optional dictionary of additional context; never
                      pass passwords or tokens here

        Raises:
            ValueError: If event_type is invalid
        """
        if event_type not in ALLOWED_EVENT_TYPES:
            raise ValueError(
                f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
            )

        ip_address = client_ip(request)
        user_agent = request.headers.get("user-agent")
        timestamp = datetime.now(timezone.utc)

        with self._session_factory() as db:
            try:
                db.add(
                    AuthEvent(
                        user_id=user_id,
                        username=username,
                        event_type=event_type,
                        ip_address=ip_address,
                        user_agent=user_agent,
                        timestamp=timestamp,
                        event_metadata=metadata or {},
                    )
                )
                db.commit()
            except SQLAlchemyError as e:
                # Recording failure should not break the auth flow
                db.rollback()
                logger.warning(
                    "Failed to record auth event - user_id=%s, event_type=%s, error=%s",
                    user_id, event_type, e,
                )
                return

        logger.info(
            "AUTH %s user_id=%s username=%s ip=%s timestamp=%s",
            event_type, user_id, username, ip_address, timestamp.isoformat(),
        )
