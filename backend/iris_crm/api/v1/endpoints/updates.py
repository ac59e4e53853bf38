"""
Updates (activity notes on projects). Author is always the signed-in profile.
"""

import datetime as dt
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from iris_crm.core.security import get_current_user_id
from iris_crm.schemas.common import MessageResponse
from iris_crm.schemas.update import UpdateCreate, UpdateEdit, UpdateListResponse, UpdateResponse
from iris_crm.services import reporting
from iris_crm.services.supabase_service import SupabaseService, get_supabase_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/updates", tags=["updates"])

UPDATES_LIST_LIMIT = 50


async def _require_project(supabase: SupabaseService, project_id: str) -> dict[str, Any]:
    project = await supabase.get_project(project_id)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Project not found",
        )
    return project


async def _require_own_update(
    supabase: SupabaseService,
    update_id: str,
    user_id: str,
    action: str,
) -> dict[str, Any]:
    row = await supabase.get_update(update_id)
    if not row:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Update not found",
        )
    if str(row.get("created_by")) != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only the author can {action} this update",
        )
    return row


async def _to_response(supabase: SupabaseService, row: dict[str, Any]) -> UpdateResponse:
    """Resolve project, account and author names for a single update."""
    project = await supabase.get_project(str(row["project_id"]))
    account = await supabase.get_account(str(project["account_id"])) if project else None
    author = await supabase.get_profile(str(row["created_by"])) if row.get("created_by") else None
    return reporting.update_response(
        row,
        reporting.index_by_id([project] if project else []),
        reporting.index_by_id([account] if account else []),
        reporting.index_by_id([author] if author else []),
    )


@router.get("", response_model=UpdateListResponse)
async def list_updates(
    q: Optional[str] = Query(None, description="Case-insensitive match on content, project or account"),
    created_by: Optional[str] = Query(None, description="Profile id of the author"),
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> UpdateListResponse:
    """GET /api/v1/updates: the 50 most recent updates by date."""
    updates = await supabase.list_updates(
        order_by="date",
        limit=UPDATES_LIST_LIMIT,
        created_by=created_by or None,
    )
    projects = await supabase.list_projects()
    accounts = await supabase.list_accounts()
    profiles = await supabase.list_profiles()
    return UpdateListResponse(
        updates=reporting.update_responses(
            updates,
            reporting.index_by_id(projects),
            reporting.index_by_id(accounts),
            reporting.index_by_id(profiles),
            q=q,
        )
    )


@router.post("", response_model=UpdateResponse, status_code=status.HTTP_201_CREATED)
async def create_update(
    body: UpdateCreate,
    supabase: SupabaseService = Depends(get_supabase_service),
    user_id: str = Depends(get_current_user_id),
) -> UpdateResponse:
    """POST /api/v1/updates: type defaults to general, date to today."""
    await _require_project(supabase, body.project_id)
    data = body.model_dump(mode="json")
    data["date"] = (body.date or dt.date.today()).isoformat()
    data["created_by"] = user_id
    row = await supabase.create_update(data)
    logger.info("Update created: %s (project %s)", row.get("id"), body.project_id)
    return await _to_response(supabase, row)


@router.patch("/{update_id}", response_model=UpdateResponse)
async def edit_update(
    update_id: str,
    body: UpdateEdit,
    supabase: SupabaseService = Depends(get_supabase_service),
    user_id: str = Depends(get_current_user_id),
) -> UpdateResponse:
    """PATCH /api/v1/updates/{id}: author only."""
    data = body.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update",
        )
    await _require_own_update(supabase, update_id, user_id, "edit")
    if "project_id" in data:
        await _require_project(supabase, data["project_id"])
    row = await supabase.update_update(update_id, data)
    return await _to_response(supabase, row)


@router.delete("/{update_id}", response_model=MessageResponse)
async def delete_update(
    update_id: str,
    supabase: SupabaseService = Depends(get_supabase_service),
    user_id: str = Depends(get_current_user_id),
) -> MessageResponse:
    """DELETE /api/v1/updates/{id}: author only."""
    await _require_own_update(supabase, update_id, user_id, "delete")
    await supabase.delete_update(update_id)
    logger.info("Update deleted: %s", update_id)
    return MessageResponse(message="Update deleted")
