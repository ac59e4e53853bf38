# Pydantic request/response schemas (API contract).

from iris_crm.schemas.common import MessageResponse
from iris_crm.schemas.auth import AuthResponse, PinAuthFailure, PinAuthSuccess, PinLoginRequest
from iris_crm.schemas.profile import (
    ApiKeysUpdate,
    ProfileCreate,
    ProfileCreatedResponse,
    ProfileResponse,
    ProfileUpdate,
    UserListResponse,
    UserSummary,
)
from iris_crm.schemas.account import (
    AccountCreate,
    AccountDetailResponse,
    AccountListResponse,
    AccountResponse,
    AccountUpdate,
    ClientOverviewResponse,
    ClientSummary,
)
from iris_crm.schemas.project import (
    AccountRef,
    ProjectCreate,
    ProjectDetailResponse,
    ProjectListResponse,
    ProjectResponse,
    ProjectStatusFilter,
    ProjectUpdate,
)
from iris_crm.schemas.update import UpdateCreate, UpdateEdit, UpdateListResponse, UpdateResponse
from iris_crm.schemas.dashboard import (
    ActivityItem,
    DashboardStats,
    DashboardSummaryResponse,
    StatusBucket,
    UpdateFrequencyResponse,
    UserActivityResponse,
    UserFrequency,
)
from iris_crm.schemas.llm import LLMProvider, LLMRequest, LLMResponse

__all__ = [
    "MessageResponse",
    "AuthResponse",
    "PinAuthFailure",
    "PinAuthSuccess",
    "PinLoginRequest",
    "ApiKeysUpdate",
    "ProfileCreate",
    "ProfileCreatedResponse",
    "ProfileResponse",
    "ProfileUpdate",
    "UserListResponse",
    "UserSummary",
    "AccountCreate",
    "AccountDetailResponse",
    "AccountListResponse",
    "AccountResponse",
    "AccountUpdate",
    "ClientOverviewResponse",
    "ClientSummary",
    "AccountRef",
    "ProjectCreate",
    "ProjectDetailResponse",
    "ProjectListResponse",
    "ProjectResponse",
    "ProjectStatusFilter",
    "ProjectUpdate",
    "UpdateCreate",
    "UpdateEdit",
    "UpdateListResponse",
    "UpdateResponse",
    "ActivityItem",
    "DashboardStats",
    "DashboardSummaryResponse",
    "StatusBucket",
    "UpdateFrequencyResponse",
    "UserActivityResponse",
    "UserFrequency",
    "LLMProvider",
    "LLMRequest",
    "LLMResponse",
]
