"""
Project (sales opportunity) schemas.
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from iris_crm.models.project import DEFAULT_PROJECT_STATUS, ProjectStatus
from iris_crm.schemas.common import blank_to_none, reject_nulls, strip_required
from iris_crm.schemas.update import UpdateResponse

ProjectStatusFilter = Literal[
    "all",
    "Need Analysis",
    "Proposal",
    "Negotiation",
    "Closed Won",
    "Closed Lost",
]


def _check_dates(start: date | None, end: date | None) -> None:
    if start and end and end < start:
        raise ValueError("end_date must not be before start_date")


class ProjectCreate(BaseModel):
    """Request body for POST /projects."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Fleet telematics rollout",
                    "account_id": "7a1e2b3c-0d4f-4a5b-8c6d-9e0f1a2b3c4d",
                    "status": "Proposal",
                    "value": 125000,
                    "start_date": "2025-04-01",
                    "end_date": "2025-09-30",
                    "description": "Phase one covers 200 vehicles.",
                }
            ]
        }
    )

    name: str
    account_id: str
    status: ProjectStatus = DEFAULT_PROJECT_STATUS
    value: float | None = Field(None, ge=0)
    start_date: date | None = None
    end_date: date | None = None
    description: str | None = None

    @field_validator("name", "account_id", mode="before")
    @classmethod
    def required_text(cls, v: object) -> object:
        return strip_required(v)

    @field_validator("description", "start_date", "end_date", "value", mode="before")
    @classmethod
    def blank_optional(cls, v: object) -> object:
        return blank_to_none(v)

    @model_validator(mode="after")
    def date_order(self) -> "ProjectCreate":
        _check_dates(self.start_date, self.end_date)
        return self


class ProjectUpdate(BaseModel):
    """Request body for PATCH /projects/{id}. Only provided fields are written."""
    name: str | None = None
    account_id: str | None = None
    status: ProjectStatus | None = None
    value: float | None = Field(None, ge=0)
    start_date: date | None = None
    end_date: date | None = None
    description: str | None = None

    @model_validator(mode="before")
    @classmethod
    def required_not_null(cls, data: object) -> object:
        return reject_nulls(data, ("name", "account_id", "status"))

    @field_validator("name", "account_id", mode="before")
    @classmethod
    def required_text(cls, v: object) -> object:
        return strip_required(v)

    @field_validator("description", "start_date", "end_date", "value", mode="before")
    @classmethod
    def blank_optional(cls, v: object) -> object:
        return blank_to_none(v)

    @model_validator(mode="after")
    def date_order(self) -> "ProjectUpdate":
        _check_dates(self.start_date, self.end_date)
        return self


class AccountRef(BaseModel):
    """Owning account as shown next to a project."""
    id: str
    name: str
    type: str | None = None


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    account_id: str
    name: str
    status: str
    value: float | None = None
    start_date: date | None = None
    end_date: date | None = None
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    account: AccountRef | None = None


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]


class ProjectDetailResponse(BaseModel):
    """Project with owning account and its full update history (newest first)."""
    project: ProjectResponse
    updates: list[UpdateResponse]
