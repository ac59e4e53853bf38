"""
Profile schemas: current user, user pickers, settings forms.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from iris_crm.models.profile import ProfileInDB, UserType
from iris_crm.schemas.common import blank_to_none, check_pin, strip_required


class ProfileResponse(BaseModel):
    """The signed-in user's own profile, API keys included (settings screen)."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None
    display_name: str
    pin: str
    user_id: str | None = None
    user_type: UserType | None = None
    openrouter_api_key: str | None = None
    deepseek_api_key: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ProfileResponse":
        p = ProfileInDB.model_validate(row)
        return cls(
            id=p.id,
            name=p.name,
            display_name=p.display_name,
            pin=p.pin,
            user_id=p.user_id,
            user_type=p.user_type,
            openrouter_api_key=p.openrouter_api_key,
            deepseek_api_key=p.deepseek_api_key,
            created_at=p.created_at,
        )


class UserSummary(BaseModel):
    """Entry in the user filter dropdown."""
    id: str
    name: str | None = None
    display_name: str


class UserListResponse(BaseModel):
    users: list[UserSummary]


class ProfileUpdate(BaseModel):
    """Request body for PATCH /profiles/me."""
    name: str = Field(..., max_length=120)

    @field_validator("name", mode="before")
    @classmethod
    def name_required(cls, v: object) -> object:
        return strip_required(v)


class ApiKeysUpdate(BaseModel):
    """Request body for PUT /profiles/me/api-keys. Blank clears a key."""
    openrouter_api_key: str | None = None
    deepseek_api_key: str | None = None

    @field_validator("openrouter_api_key", "deepseek_api_key", mode="before")
    @classmethod
    def blank_clears(cls, v: object) -> object:
        return blank_to_none(v)


class ProfileCreate(BaseModel):
    """Request body for POST /profiles (admin)."""
    name: str = Field(..., max_length=120)
    pin: str
    is_admin: bool = False

    @field_validator("name", mode="before")
    @classmethod
    def name_required(cls, v: object) -> object:
        return strip_required(v)

    @field_validator("pin")
    @classmethod
    def pin_format(cls, v: str) -> str:
        return check_pin(v)


class ProfileCreatedResponse(BaseModel):
    id: str
