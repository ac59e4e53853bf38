"""
Common Pydantic schemas and shared validator bodies.
"""

from pydantic import BaseModel

from iris_crm.models.profile import is_valid_pin


class MessageResponse(BaseModel):
    message: str
    success: bool = True


def strip_required(v: object) -> object:
    """Shared validator body: trim strings and reject blank ones."""
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
    return v


def reject_nulls(data: object, fields: tuple[str, ...]) -> object:
    """Shared validator body: a partial update may omit a NOT NULL column but not null it."""
    if isinstance(data, dict):
        nulled = [f for f in fields if f in data and data[f] is None]
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
    return data


def blank_to_none(v: object) -> object:
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


def check_pin(v: str) -> str:
    v = v.strip()
    if not is_valid_pin(v):
        raise ValueError("PIN must be 6 digits")
    return v
