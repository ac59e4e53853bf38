"""
Accounts (customers): list with project counts, client value overview, CRUD and detail.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from iris_crm.core.security import get_current_user_id
from iris_crm.schemas.account import (
    AccountCreate,
    AccountDetailResponse,
    AccountListResponse,
    AccountResponse,
    AccountUpdate,
    ClientOverviewResponse,
)
from iris_crm.schemas.common import MessageResponse
from iris_crm.services import reporting
from iris_crm.services.supabase_service import SupabaseService, get_supabase_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["accounts"])

RECENT_UPDATES_LIMIT = 5


@router.get("", response_model=AccountListResponse)
async def list_accounts(
    q: Optional[str] = Query(None, description="Case-insensitive match on name or type"),
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> AccountListResponse:
    """GET /api/v1/accounts: accounts ordered by name with project counts."""
    accounts = await supabase.list_accounts()
    projects = await supabase.list_projects()
    return AccountListResponse(accounts=reporting.account_responses(accounts, projects, q=q))


@router.get("/overview", response_model=ClientOverviewResponse)
async def client_overview(
    q: Optional[str] = Query(None, description="Case-insensitive match on name or type"),
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> ClientOverviewResponse:
    """GET /api/v1/accounts/overview: won vs. pipeline value per account plus totals."""
    accounts = await supabase.list_accounts()
    projects = await supabase.list_projects()
    return reporting.client_overview(accounts, projects, q=q)


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    body: AccountCreate,
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> AccountResponse:
    """POST /api/v1/accounts: name and type required, status defaults to Active."""
    row = await supabase.create_account(body.model_dump())
    logger.info("Account created: %s", row.get("id"))
    return reporting.account_response(row)


@router.get("/{account_id}", response_model=AccountDetailResponse)
async def get_account(
    account_id: str,
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> AccountDetailResponse:
    """GET /api/v1/accounts/{id}: account, its projects and the latest updates across them."""
    account = await supabase.get_account(account_id)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Account not found",
        )
    projects = await supabase.list_projects(account_id=account_id)
    updates = await supabase.list_updates(
        order_by="date",
        limit=RECENT_UPDATES_LIMIT,
        project_ids=[str(p["id"]) for p in projects],
    )
    profiles = await supabase.list_profiles() if updates else []

    accounts_by_id = reporting.index_by_id([account])
    return AccountDetailResponse(
        account=reporting.account_response(account, len(projects)),
        projects=reporting.project_responses(projects, accounts_by_id),
        recent_updates=reporting.update_responses(
            updates,
            reporting.index_by_id(projects),
            accounts_by_id,
            reporting.index_by_id(profiles),
        ),
    )


@router.patch("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: str,
    body: AccountUpdate,
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> AccountResponse:
    """PATCH /api/v1/accounts/{id}: only provided fields are written."""
    data = body.model_dump(exclude_unset=True)
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update",
        )
    row = await supabase.update_account(account_id, data)
    projects = await supabase.list_projects(account_id=account_id)
    return reporting.account_response(row, len(projects))


@router.delete("/{account_id}", response_model=MessageResponse)
async def delete_account(
    account_id: str,
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> MessageResponse:
    """DELETE /api/v1/accounts/{id}: refused while the account still has projects."""
    if await supabase.list_projects(account_id=account_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Account has projects; delete them first",
        )
    await supabase.delete_account(account_id)
    logger.info("Account deleted: %s", account_id)
    return MessageResponse(message="Account deleted")
