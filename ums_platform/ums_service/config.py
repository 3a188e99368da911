"""
Configuration management for the user management service
"""
from datetime import timedelta
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .auth import TokenConfig


class Settings(BaseSettings):
    """Service configuration loaded from environment variables"""

    # Server Configuration
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./ums.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # Token Configuration
    SECRET_KEY: str = "change-this-secret-in-prod"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 180
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 4320

    # Wallet Service Integration
    WALLET_HOST: str = "http://wallet-service:8081"
    WALLET_ENDPOINT_CREATE: str = "/wallet/v1/"
    WALLET_TIMEOUT_SECONDS: float = 5.0

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    def token_config(self) -> TokenConfig:
        return TokenConfig(
            signing_key=self.SECRET_KEY,
            access_duration=timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_duration=timedelta(minutes=self.REFRESH_TOKEN_EXPIRE_MINUTES),
            algorithm=self.JWT_ALGORITHM,
        )
