"""
Pydantic models for public.projects (Supabase).
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

ProjectStatus = Literal[
    "Need Analysis",
    "Proposal",
    "Negotiation",
    "Closed Won",
    "Closed Lost",
]

DEFAULT_PROJECT_STATUS: ProjectStatus = "Need Analysis"
CLOSED_WON = "Closed Won"
CLOSED_LOST = "Closed Lost"
CLOSED_STATUSES = frozenset({CLOSED_WON, CLOSED_LOST})


class ProjectBase(BaseModel):
    account_id: str
    name: str
    status: str = DEFAULT_PROJECT_STATUS
    value: float | None = None
    start_date: date | None = None
    end_date: date | None = None
    description: str | None = None


class ProjectInDB(ProjectBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_closed(self) -> bool:
        return self.status in CLOSED_STATUSES

    @property
    def amount(self) -> float:
        return self.value or 0.0


class Project(ProjectInDB):
    pass
