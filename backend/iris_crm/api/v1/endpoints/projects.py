"""
Projects (sales opportunities): list with filters, CRUD and detail with update history.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from iris_crm.core.security import get_current_user_id
from iris_crm.schemas.common import MessageResponse
from iris_crm.schemas.project import (
    ProjectCreate,
    ProjectDetailResponse,
    ProjectListResponse,
    ProjectResponse,
    ProjectStatusFilter,
    ProjectUpdate,
)
from iris_crm.services import reporting
from iris_crm.services.supabase_service import SupabaseService, get_supabase_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


async def _require_account(supabase: SupabaseService, account_id: str) -> dict[str, Any]:
    account = await supabase.get_account(account_id)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Account not found",
        )
    return account


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    q: Optional[str] = Query(None, description="Case-insensitive match on project or account name"),
    status_filter: ProjectStatusFilter = Query("all", alias="status"),
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> ProjectListResponse:
    """GET /api/v1/projects: newest first, with owning account."""
    projects = await supabase.list_projects()
    accounts = await supabase.list_accounts()
    return ProjectListResponse(
        projects=reporting.project_responses(
            projects,
            reporting.index_by_id(accounts),
            q=q,
            status=status_filter,
        )
    )


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> ProjectResponse:
    """POST /api/v1/projects: account must exist; status defaults to Need Analysis."""
    account = await _require_account(supabase, body.account_id)
    row = await supabase.create_project(body.model_dump(mode="json"))
    logger.info("Project created: %s (account %s)", row.get("id"), body.account_id)
    return reporting.project_response(row, reporting.index_by_id([account]))


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(
    project_id: str,
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> ProjectDetailResponse:
    """GET /api/v1/projects/{id}: project, owning account and all updates by date."""
    project = await supabase.get_project(project_id)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )
    account = await supabase.get_account(str(project["account_id"]))
    updates = await supabase.list_updates(order_by="date", project_ids=[project_id])
    profiles = await supabase.list_profiles() if updates else []

    accounts_by_id = reporting.index_by_id([account] if account else [])
    return ProjectDetailResponse(
        project=reporting.project_response(project, accounts_by_id),
        updates=reporting.update_responses(
            updates,
            reporting.index_by_id([project]),
            accounts_by_id,
            reporting.index_by_id(profiles),
        ),
    )


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    body: ProjectUpdate,
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> ProjectResponse:
    """PATCH /api/v1/projects/{id}: only provided fields are written."""
    data = body.model_dump(mode="json", exclude_unset=True)
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update",
        )
    existing = await supabase.get_project(project_id)
    if not existing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )
    start = data.get("start_date", existing.get("start_date"))
    end = data.get("end_date", existing.get("end_date"))
    if start and end and str(end) < str(start):
        raise HTTPException(
            status_code=422,
            detail="end_date must not be before start_date",
        )
    if "account_id" in data:
        await _require_account(supabase, data["account_id"])

    row = await supabase.update_project(project_id, data)
    account = await supabase.get_account(str(row["account_id"]))
    return reporting.project_response(row, reporting.index_by_id([account] if account else []))


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: str,
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> MessageResponse:
    """DELETE /api/v1/projects/{id}."""
    await supabase.delete_project(project_id)
    logger.info("Project deleted: %s", project_id)
    return MessageResponse(message="Project deleted")
