"""
User Management Service - registration, login, sessions and token validation
"""
from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .auth import PasswordVerifier, TokenCodec
from .config import Settings
from .db import build_engine, build_session_factory, init_db
from .errors import BAD_REQUEST_ERRORS, UNAUTHORIZED_ERRORS, UMSError
from .external.wallet import WalletClient
from .repository import SqlAlchemyCredentialStore
from .routes import health, token_validation, users
from .services.registration import RegistrationService
from .services.sessions import SessionManager
from .utils.event_logger import AuthEventRecorder
from .utils.logging_config import configure_logging

logger = logging.getLogger(__name__)

ERR_BAD_REQUEST = "bad request"
ERR_UNAUTHORIZED = "unauthorized"
ERR_SERVER_ERROR = "internal server error"
ERR_INVALID_TOKEN_REQUEST = "invalid token request"

RPC_PREFIX = "/rpc/"


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, "data": None})


def status_for(error: UMSError) -> tuple:
    if isinstance(error, BAD_REQUEST_ERRORS):
        return status.HTTP_400_BAD_REQUEST, ERR_BAD_REQUEST
    if isinstance(error, UNAUTHORIZED_ERRORS):
        return status.HTTP_401_UNAUTHORIZED, ERR_UNAUTHORIZED
    return status.HTTP_500_INTERNAL_SERVER_ERROR, ERR_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(UMSError)
    async def handle_service_error(request: Request, exc: UMSError):
        status_code, message = status_for(exc)
        log = logger.error if status_code >= 500 else logger.info
        log("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc)
        return _envelope(status_code, message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        # Only field locations are logged; the input may hold a password.
        fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
        logger.info("%s %s rejected: invalid fields %s", request.method, request.url.path, fields)
        # RPC callers read the outcome from `message` and always get 200.
        if request.url.path.startswith(RPC_PREFIX):
            return _envelope(status.HTTP_200_OK, ERR_INVALID_TOKEN_REQUEST)
        return _envelope(status.HTTP_400_BAD_REQUEST, ERR_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception("%s %s crashed", request.method, request.url.path)
        return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, ERR_SERVER_ERROR)


def create_app(settings: Optional[Settings] = None, wallet_client: Optional[WalletClient] = None) -> FastAPI:
    """
    Build the application and wire its components from `settings`.

    Args:
        settings: Service configuration; read from the environment when omitted
        wallet_client: Override for the wallet service client (tests)
    """
    settings = settings or Settings()

    engine = build_engine(
        settings.DATABASE_URL,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )
    session_factory = build_session_factory(engine)

    store = SqlAlchemyCredentialStore(session_factory)
    verifier = PasswordVerifier()
    codec = TokenCodec(settings.token_config())
    wallet_client = wallet_client or WalletClient(
        settings.WALLET_HOST,
        settings.WALLET_ENDPOINT_CREATE,
        timeout=settings.WALLET_TIMEOUT_SECONDS,
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        """Initialize database on startup"""
        init_db(engine)
        yield
        engine.dispose()

    app = FastAPI(
        title="User Management Service",
        description="Registration, login, sessions and token validation",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.session_manager = SessionManager(store, codec, verifier)
    app.state.registration_service = RegistrationService(store, verifier, wallet_client)
    app.state.event_recorder = AuthEventRecorder(session_factory)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(token_validation.router)

    return app


def serve() -> None:
    """Run the HTTP server with uvicorn."""
    import uvicorn

    settings = Settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    logger.info("start listening http on port: %s", settings.PORT)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    serve()
