"""
Dashboard schemas: headline stats, pipeline by status, activity feeds, insights.
"""

from datetime import datetime

from pydantic import BaseModel

from iris_crm.schemas.update import UpdateResponse


class DashboardStats(BaseModel):
    total_accounts: int = 0
    total_projects: int = 0
    total_pipeline_value: float = 0.0
    active_users: int = 0
    recent_updates_count: int = 0


class StatusBucket(BaseModel):
    """Projects grouped by pipeline status (count and summed value)."""
    status: str
    count: int
    value: float


class ActivityItem(BaseModel):
    """Recent-activity feed entry."""
    id: str
    type: str = "update"
    description: str
    date: datetime | None = None
    project_name: str | None = None
    account_name: str | None = None
    created_by: str
    update_type: str


class DashboardSummaryResponse(BaseModel):
    stats: DashboardStats
    projects_by_status: list[StatusBucket]
    recent_activity: list[ActivityItem]
    insights: list[str]


class UserActivityResponse(BaseModel):
    updates: list[UpdateResponse]


class UserFrequency(BaseModel):
    user_name: str
    updates_count: int = 0
    last_7_days: int = 0
    last_30_days: int = 0


class UpdateFrequencyResponse(BaseModel):
    users: list[UserFrequency]
