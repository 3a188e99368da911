"""
Session lifecycle: login, logout, access token refresh and token validation.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from typing import Callable

from ..auth import TOKEN_KIND_ACCESS, TOKEN_KIND_REFRESH, Claim, PasswordVerifier, TokenCodec
from ..errors import (
    AccountNotFound,
    EmptyToken,
    InvalidCredentials,
    SessionNotFound,
    SessionPersistFailure,
    StoreError,
    TokenExpired,
)
from ..models import UserSession
from ..repository import CredentialStore

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LoginResult:
    user_id: int
    username: str
    full_name: str
    email: str
    token: str
    refresh_token: str


@dataclass(frozen=True)
class RefreshResult:
    token: str


class SessionManager:
    """
    Orchestrates the session lifecycle on top of the credential store.

    Nothing is cached between calls: every operation re-reads the store, so
    concurrent requests are only coordinated by the database.
    """

    def __init__(
        self,
        store: CredentialStore,
        codec: TokenCodec,
        verifier: PasswordVerifier,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.codec = codec
        self.verifier = verifier
        self.clock = clock

    def login(self, username: str, password: str) -> LoginResult:
        user = self.store.get_user_by_username(username)
        if user is None:
            raise AccountNotFound("account not found")

        if not self.verifier.verify(user.password, password):
            logger.info("Login rejected: user_id=%s reason=password_mismatch", user.id)
            raise InvalidCredentials("incorrect password")

        now = self.clock()
        token = self.codec.issue(user.id, user.username, user.full_name, user.email, TOKEN_KIND_ACCESS, now)
        refresh_token = self.codec.issue(user.id, user.username, user.full_name, user.email, TOKEN_KIND_REFRESH, now)

        session = UserSession(
            user_id=user.id,
            token=token,
            refresh_token=refresh_token,
            token_expired=self.codec.expiry_for(TOKEN_KIND_ACCESS, now),
            refresh_token_expired=self.codec.expiry_for(TOKEN_KIND_REFRESH, now),
        )
        try:
            self.store.insert_session(session)
        except StoreError as e:
            raise SessionPersistFailure("failed to insert new session") from e

        logger.info("Login succeeded: user_id=%s session_id=%s", user.id, session.id)
        return LoginResult(
            user_id=user.id,
            username=user.username,
            full_name=user.full_name,
            email=user.email,
            token=token,
            refresh_token=refresh_token,
        )

    def logout(self, token: str) -> None:
        # Store presence is all that matters here; unknown tokens delete nothing.
        deleted = self.store.delete_session(token)
        logger.info("Logout: sessions_deleted=%s", deleted)

    def refresh_token(self, refresh_token: str, claim: Claim) -> RefreshResult:
        now = self.clock()
        token = self.codec.issue(
            claim.user_id, claim.username, claim.full_name, claim.email, TOKEN_KIND_ACCESS, now
        )
        updated = self.store.update_token_by_refresh_token(
            token, self.codec.expiry_for(TOKEN_KIND_ACCESS, now), refresh_token
        )
        if updated == 0:
            raise SessionNotFound("no session for refresh token")

        logger.info("Access token refreshed: user_id=%s", claim.user_id)
        return RefreshResult(token=token)

    def validate_token(self, token: str) -> Claim:
        """
        Decode `token` and require a live session row holding it.

        Expiry is not checked here; `authenticate` does that for HTTP calls.
        """
        if not token:
            raise EmptyToken("token is empty")

        claim = self.codec.decode(token)

        if self.store.get_session_by_token(token) is None:
            raise SessionNotFound("user session not found")

        return claim

    def authenticate(self, token: str) -> Claim:
        """Gate for calls made with an access token."""
        if not token:
            raise EmptyToken("authorization empty")

        if self.store.get_session_by_token(token) is None:
            raise SessionNotFound("user session not found")

        return self._decode_unexpired(token)

    def authenticate_refresh(self, refresh_token: str) -> Claim:
        """Gate for the refresh endpoint, matched on the refresh token column."""
        if not refresh_token:
            raise EmptyToken("authorization empty")

        if self.store.get_session_by_refresh_token(refresh_token) is None:
            raise SessionNotFound("user session not found")

        return self._decode_unexpired(refresh_token)

    def _decode_unexpired(self, token: str) -> Claim:
        claim = self.codec.decode(token)
        if claim.is_expired(self.clock()):
            logger.info("Token expired: user_id=%s expires_at=%s", claim.user_id, claim.expires_at.isoformat())
            raise TokenExpired("token is expired")
        return claim
