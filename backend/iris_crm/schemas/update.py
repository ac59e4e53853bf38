"""
Update (project activity note) schemas.
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict, field_validator

from iris_crm.models.update import DEFAULT_UPDATE_TYPE, UpdateType
from iris_crm.schemas.common import strip_required


class UpdateCreate(BaseModel):
    """Request body for POST /updates. Author comes from the session."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "project_id": "2f3c0d8e-4b1a-4c6e-9a57-0e4f1d6b2c90",
                    "content": "Kick-off call with procurement, next step is a demo.",
                    "type": "call",
                    "date": "2025-03-14",
                }
            ]
        }
    )

    project_id: str
    content: str
    type: UpdateType = DEFAULT_UPDATE_TYPE
    date: dt.date | None = None

    @field_validator("project_id", "content", mode="before")
    @classmethod
    def required_text(cls, v: object) -> object:
        return strip_required(v)


class UpdateEdit(BaseModel):
    """Request body for PATCH /updates/{id}."""
    project_id: str | None = None
    content: str | None = None
    type: UpdateType | None = None
    date: dt.date | None = None

    @field_validator("project_id", "content", mode="before")
    @classmethod
    def required_text(cls, v: object) -> object:
        return strip_required(v)


class UpdateResponse(BaseModel):
    """Update row shaped for display: project, account and author names resolved."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    created_by: str | None = None
    content: str
    type: str
    date: dt.date | None = None
    created_at: dt.datetime | None = None
    project_name: str | None = None
    account_name: str | None = None
    author_name: str | None = None


class UpdateListResponse(BaseModel):
    updates: list[UpdateResponse]
