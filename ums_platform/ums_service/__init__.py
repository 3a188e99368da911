"""
ums_service package

This package contains the backend of the user management service:

- FastAPI application factory and routes (`main.py`, `routes/`)
- SQLAlchemy models, engine and credential store (`models.py`, `db.py`, `repository.py`)
- Password hashing and JWT token codec (`auth.py`)
- Session lifecycle and registration services (`services/`)
- Wallet service client (`external/wallet.py`)
"""
