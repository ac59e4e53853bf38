"""
Account (customer) schemas, including the client value overview.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from iris_crm.models.account import DEFAULT_ACCOUNT_STATUS, AccountStatus, AccountType
from iris_crm.schemas.common import blank_to_none, reject_nulls, strip_required
from iris_crm.schemas.project import ProjectResponse
from iris_crm.schemas.update import UpdateResponse


class AccountCreate(BaseModel):
    """Request body for POST /accounts."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Acme Logistics",
                    "type": "Enterprise",
                    "status": "Active",
                    "description": "Regional freight operator, 3 depots.",
                }
            ]
        }
    )

    name: str
    type: AccountType
    status: AccountStatus = DEFAULT_ACCOUNT_STATUS
    description: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def name_required(cls, v: object) -> object:
        return strip_required(v)

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, v: object) -> object:
        return blank_to_none(v)


class AccountUpdate(BaseModel):
    """Request body for PATCH /accounts/{id}."""
    name: str | None = None
    type: AccountType | None = None
    status: AccountStatus | None = None
    description: str | None = None

    @model_validator(mode="before")
    @classmethod
    def required_not_null(cls, data: object) -> object:
        return reject_nulls(data, ("name", "type", "status"))

    @field_validator("name", mode="before")
    @classmethod
    def name_required(cls, v: object) -> object:
        return strip_required(v)

    @field_validator("description", mode="before")
    @classmethod
    def blank_description(cls, v: object) -> object:
        return blank_to_none(v)


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    status: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    project_count: int = 0


class AccountListResponse(BaseModel):
    accounts: list[AccountResponse]


class AccountDetailResponse(BaseModel):
    """Account with its projects and the latest updates across them."""
    account: AccountResponse
    projects: list[ProjectResponse]
    recent_updates: list[UpdateResponse]


class ClientSummary(BaseModel):
    """Per-account won vs. open pipeline value."""
    id: str
    name: str
    type: str
    status: str
    total_projects: int
    completed_value: float
    pipeline_value: float
    total_value: float


class ClientOverviewResponse(BaseModel):
    clients: list[ClientSummary]
    total_clients: int
    completed_value: float
    pipeline_value: float
    total_value: float
