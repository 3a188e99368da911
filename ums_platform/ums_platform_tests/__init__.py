"""
ums_platform_tests package

Tests for the user management service:

- Token codec and password verifier (`test_auth.py`)
- Credential store (`test_repository.py`)
- Session lifecycle and registration services (`test_sessions.py`, `test_registration.py`)
- Wallet client (`test_wallet.py`)
- HTTP API and token validation endpoint (`test_api.py`, `test_token_validation.py`)
- Auth event recording and database initialization (`test_event_logger.py`, `test_db_init.py`)
"""
