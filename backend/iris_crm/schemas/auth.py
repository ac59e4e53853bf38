"""
Auth-related Pydantic schemas (PIN sign in, session tokens, create-pin-auth function).
"""

from pydantic import BaseModel, ConfigDict, field_validator

from iris_crm.schemas.common import check_pin
from iris_crm.schemas.profile import ProfileResponse


class PinLoginRequest(BaseModel):
    """Request body for PIN sign in."""

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"pin": "123456"}]}
    )

    pin: str

    @field_validator("pin")
    @classmethod
    def pin_format(cls, v: str) -> str:
        return check_pin(v)


class AuthResponse(BaseModel):
    """Response after successful PIN sign in."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                    "token_type": "bearer",
                    "expires_in": 43200,
                    "expires_at": 1736932200,
                    "user": {
                        "id": "550e8400-e29b-41d4-a716-446655440000",
                        "name": "Jane Doe",
                        "display_name": "Jane Doe",
                        "pin": "123456",
                        "user_id": "8d2c7e0a-63f4-4b1e-9b55-2f1b0f6c4a11",
                        "user_type": "User",
                        "openrouter_api_key": None,
                        "deepseek_api_key": None,
                    },
                }
            ]
        }
    )

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    expires_at: int
    user: ProfileResponse


class PinAuthSuccess(BaseModel):
    """Body returned by POST /create-pin-auth on success."""
    success: bool = True
    user_id: str


class PinAuthFailure(BaseModel):
    """Body returned by POST /create-pin-auth on any failure."""
    error: str
