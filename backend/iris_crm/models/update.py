"""
Pydantic models for public.updates (Supabase).
"""

import datetime as dt
from typing import Literal

from pydantic import BaseModel, ConfigDict

UpdateType = Literal["general", "call", "meeting", "email"]

DEFAULT_UPDATE_TYPE: UpdateType = "general"


class UpdateBase(BaseModel):
    project_id: str
    created_by: str | None = None
    content: str
    type: str = DEFAULT_UPDATE_TYPE
    date: dt.date | None = None


class UpdateInDB(UpdateBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class Update(UpdateInDB):
    pass
