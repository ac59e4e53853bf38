"""
Pydantic models for public.profiles (Supabase).
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

UserType = Literal["Admin", "User"]


class ProfileBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pin: str
    name: str | None = None
    user_id: str | None = None
    openrouter_api_key: str | None = None
    deepseek_api_key: str | None = None
    # Column is literally named "Type" in the database
    user_type: UserType | None = Field(default=None, alias="Type")


class ProfileInDB(ProfileBase):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return profile_display_name(self.name, self.pin)


class Profile(ProfileInDB):
    pass


def profile_display_name(name: str | None, pin: str | None) -> str:
    """Name shown next to updates and in user pickers; unnamed profiles fall back to their PIN."""
    if name and name.strip():
        return name.strip()
    return f"User {pin}"


PIN_LENGTH = 6


def is_valid_pin(pin: object) -> bool:
    """True for exactly six ASCII digits."""
    return isinstance(pin, str) and len(pin) == PIN_LENGTH and pin.isascii() and pin.isdigit()
