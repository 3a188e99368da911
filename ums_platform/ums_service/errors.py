"""
Error kinds raised by the user management service.

Every error is terminal for the current call. The HTTP layer maps them to a
coarse set of responses (see `main.py`), so the messages here are never shown
to clients verbatim and must not contain passwords or tokens.
"""


class UMSError(Exception):
    """Base class for all service errors."""


class AccountNotFound(UMSError):
    pass


class InvalidCredentials(UMSError):
    pass


class AccountAlreadyExists(UMSError):
    pass


class SessionNotFound(UMSError):
    pass


class SessionPersistFailure(UMSError):
    pass


class InvalidSignature(UMSError):
    pass


class Malformed(UMSError):
    pass


class EmptyToken(UMSError):
    pass


class TokenExpired(UMSError):
    pass


class StoreError(UMSError):
    """Wraps a failure of the underlying database."""


class WalletProvisionFailure(UMSError):
    pass


# Failures caused by the caller's input or credentials.
BAD_REQUEST_ERRORS = (AccountAlreadyExists,)

UNAUTHORIZED_ERRORS = (
    AccountNotFound,
    InvalidCredentials,
    SessionNotFound,
    EmptyToken,
    InvalidSignature,
    Malformed,
    TokenExpired,
)
