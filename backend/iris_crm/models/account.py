"""
Pydantic models for public.accounts (Supabase).
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

AccountType = Literal["Enterprise", "SMB", "Startup", "Government", "Non-Profit"]
AccountStatus = Literal["Active", "Inactive", "Prospect"]

DEFAULT_ACCOUNT_STATUS: AccountStatus = "Active"


class AccountBase(BaseModel):
    name: str
    # Stored as free text; older rows may hold values outside AccountType
    type: str
    status: str = DEFAULT_ACCOUNT_STATUS
    description: str | None = None


class AccountInDB(AccountBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Account(AccountInDB):
    pass
