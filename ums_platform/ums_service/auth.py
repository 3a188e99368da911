from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import uuid

import jwt
from passlib.context import CryptContext

from .errors import InvalidSignature, Malformed

TOKEN_KIND_ACCESS = "access"
TOKEN_KIND_REFRESH = "refresh"

REQUIRED_CLAIMS = ("user_id", "username", "full_name", "email", "iat", "exp")


class PasswordVerifier:
    # Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
    def __init__(self, schemes=("pbkdf2_sha256",)):
        self._context = CryptContext(schemes=list(schemes), deprecated="auto")

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, stored_hash: str, candidate_password: str) -> bool:
        try:
            return self._context.verify(candidate_password, stored_hash)
        except (ValueError, TypeError):
            # Unrecognised or corrupted hash: treat as a mismatch.
            return False


@dataclass(frozen=True)
class TokenConfig:
    signing_key: str
    access_duration: timedelta
    refresh_duration: timedelta
    algorithm: str = "HS256"

    def duration_for(self, kind: str) -> timedelta:
        if kind == TOKEN_KIND_ACCESS:
            return self.access_duration
        if kind == TOKEN_KIND_REFRESH:
            return self.refresh_duration
        raise ValueError(f"Unknown token kind '{kind}'")


@dataclass(frozen=True)
class Claim:
    user_id: int
    username: str
    full_name: str
    email: str
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TokenCodec:
    """
    Signs and parses JWT bearer tokens.

    Expiry is carried as data only: `decode` accepts expired tokens so that
    callers can tell "cryptographically invalid" apart from "valid but stale".
    """

    def __init__(self, config: TokenConfig):
        self.config = config

    def expiry_for(self, kind: str, issued_at: datetime) -> datetime:
        return _as_utc(issued_at) + self.config.duration_for(kind)

    def issue(
        self,
        user_id: int,
        username: str,
        full_name: str,
        email: str,
        kind: str,
        issued_at: datetime,
    ) -> str:
        issued_at = _as_utc(issued_at)
        payload = {
            "user_id": user_id,
            "username": username,
            "full_name": full_name,
            "email": email,
            "iat": issued_at,
            "exp": self.expiry_for(kind, issued_at),
            # two tokens minted for one account within the same second still differ
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self.config.signing_key, algorithm=self.config.algorithm)

    def decode(self, token: str) -> Claim:
        try:
            data = jwt.decode(
                token,
                self.config.signing_key,
                algorithms=[self.config.algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": ["iat", "exp"]},
            )
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignature("token signature is invalid") from exc
        except jwt.InvalidTokenError as exc:
            raise Malformed("token could not be decoded") from exc

        missing = [name for name in REQUIRED_CLAIMS if name not in data]
        if missing:
            raise Malformed(f"token is missing claims: {', '.join(missing)}")

        try:
            return Claim(
                user_id=int(data["user_id"]),
                username=str(data["username"]),
                full_name=str(data["full_name"]),
                email=str(data["email"]),
                issued_at=datetime.fromtimestamp(int(data["iat"]), tz=timezone.utc),
                expires_at=datetime.fromtimestamp(int(data["exp"]), tz=timezone.utc),
            )
        except (TypeError, ValueError, OverflowError) as exc:
            raise Malformed("token claims have unexpected types") from exc
