# Supabase table models: profiles, accounts, projects, updates

from iris_crm.models.profile import (
    Profile,
    ProfileInDB,
    UserType,
    PIN_LENGTH,
    is_valid_pin,
    profile_display_name,
)
from iris_crm.models.account import (
    DEFAULT_ACCOUNT_STATUS,
    Account,
    AccountInDB,
    AccountStatus,
    AccountType,
)
from iris_crm.models.project import (
    CLOSED_LOST,
    CLOSED_STATUSES,
    CLOSED_WON,
    DEFAULT_PROJECT_STATUS,
    Project,
    ProjectInDB,
    ProjectStatus,
)
from iris_crm.models.update import (
    DEFAULT_UPDATE_TYPE,
    Update,
    UpdateInDB,
    UpdateType,
)

__all__ = [
    "Profile",
    "ProfileInDB",
    "UserType",
    "profile_display_name",
    "PIN_LENGTH",
    "is_valid_pin",
    "Account",
    "AccountInDB",
    "AccountStatus",
    "AccountType",
    "DEFAULT_ACCOUNT_STATUS",
    "Project",
    "ProjectInDB",
    "ProjectStatus",
    "DEFAULT_PROJECT_STATUS",
    "CLOSED_WON",
    "CLOSED_LOST",
    "CLOSED_STATUSES",
    "Update",
    "UpdateInDB",
    "UpdateType",
    "DEFAULT_UPDATE_TYPE",
]
