from pydantic import BaseModel, Field

from typing import Any, Optional

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: str = Field(..., max_length=100, pattern=EMAIL_PATTERN)
    full_name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class WalletData(BaseModel):
    id: int
    user_id: int
    balance: float

    class Config:
        from_attributes = True


class RegisterData(BaseModel):
    user_id: int
    username: str
    email: str
    full_name: str
    wallet: Optional[WalletData] = None

    class Config:
        from_attributes = True


class LoginData(BaseModel):
    user_id: int
    username: str
    full_name: str
    email: str
    token: str
    refresh_token: str

    class Config:
        from_attributes = True


class RefreshTokenData(BaseModel):
    token: str

    class Config:
        from_attributes = True


class Envelope(BaseModel):
    """Uniform wrapper for every HTTP response body."""
    message: str
    data: Optional[Any] = None


# Token validation RPC
class TokenRequest(BaseModel):
    token: str = ""


class UserData(BaseModel):
    user_id: int
    username: str
    full_name: str


class TokenResponse(BaseModel):
    message: str
    data: Optional[UserData] = None
