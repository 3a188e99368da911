"""
Unit tests for the token codec and password verifier.
"""
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from ums_platform.ums_service.auth import (
    TOKEN_KIND_ACCESS,
    TOKEN_KIND_REFRESH,
    PasswordVerifier,
    TokenCodec,
    TokenConfig,
)
from ums_platform.ums_service.errors import InvalidSignature, Malformed

ISSUED_AT = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


def test_access_token_round_trip(codec, token_config):
    token = codec.issue(7, "alice", "Alice Liddell", "alice@x.com", TOKEN_KIND_ACCESS, ISSUED_AT)
    claim = codec.decode(token)

    assert claim.user_id == 7
    assert claim.username == "alice"
    assert claim.full_name == "Alice Liddell"
    assert claim.email == "alice@x.com"
    assert claim.issued_at == ISSUED_AT
    assert claim.expires_at == ISSUED_AT + token_config.access_duration


def test_refresh_token_uses_refresh_duration(codec, token_config):
    token = codec.issue(7, "alice", "Alice Liddell", "alice@x.com", TOKEN_KIND_REFRESH, ISSUED_AT)
    claim = codec.decode(token)

    assert claim.expires_at == ISSUED_AT + token_config.refresh_duration
    assert token_config.refresh_duration > token_config.access_duration


def test_naive_issue_time_is_treated_as_utc(codec, token_config):
    token = codec.issue(7, "alice", "Alice", "alice@x.com", TOKEN_KIND_ACCESS, datetime(2024, 1, 15, 10, 30))
    assert codec.decode(token).expires_at == ISSUED_AT + token_config.access_duration


def test_unknown_token_kind_rejected(codec):
    with pytest.raises(ValueError):
        codec.issue(7, "alice", "Alice", "alice@x.com", "session", ISSUED_AT)


def test_tokens_issued_in_same_instant_differ(codec):
    first = codec.issue(7, "alice", "Alice", "alice@x.com", TOKEN_KIND_ACCESS, ISSUED_AT)
    second = codec.issue(7, "alice", "Alice", "alice@x.com", TOKEN_KIND_ACCESS, ISSUED_AT)
    assert first != second


def test_decode_does_not_reject_expired_token(codec):
    long_ago = datetime(2000, 1, 1, tzinfo=timezone.utc)
    token = codec.issue(7, "alice", "Alice", "alice@x.com", TOKEN_KIND_ACCESS, long_ago)

    claim = codec.decode(token)
    assert claim.is_expired(datetime.now(timezone.utc))


def test_decode_with_wrong_key_raises_invalid_signature(codec):
    other = TokenCodec(TokenConfig(
        signing_key="another-secret-key-0123456789abcdef01234",
        access_duration=timedelta(minutes=5),
        refresh_duration=timedelta(minutes=60),
    ))
    token = other.issue(7, "alice", "Alice", "alice@x.com", TOKEN_KIND_ACCESS, ISSUED_AT)

    with pytest.raises(InvalidSignature):
        codec.decode(token)


@pytest.mark.parametrize("token", ["not-a-token", "a.b.c", ""])
def test_decode_garbage_raises_malformed(codec, token):
    with pytest.raises(Malformed):
        codec.decode(token)


def test_decode_missing_identity_claims_raises_malformed(codec, token_config):
    token = jwt.encode(
        {"username": "alice", "iat": ISSUED_AT, "exp": ISSUED_AT + timedelta(minutes=5)},
        token_config.signing_key,
        algorithm=token_config.algorithm,
    )
    with pytest.raises(Malformed):
        codec.decode(token)


def test_password_hash_is_salted():
    verifier = PasswordVerifier()
    first = verifier.hash("secret123")
    second = verifier.hash("secret123")

    assert first != "secret123"
    assert first != second
    assert verifier.verify(first, "secret123")
    assert verifier.verify(second, "secret123")


def test_password_mismatch():
    verifier = PasswordVerifier()
    stored = verifier.hash("secret123")
    assert verifier.verify(stored, "secret124") is False


def test_corrupted_hash_is_a_mismatch():
    verifier = PasswordVerifier()
    assert verifier.verify("not-a-hash", "secret123") is False
