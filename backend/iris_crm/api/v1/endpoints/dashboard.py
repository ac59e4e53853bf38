"""
Dashboard endpoints: pipeline summary and insights, user activity, update frequency.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from iris_crm.core.security import get_current_user_id
from iris_crm.schemas.dashboard import (
    DashboardSummaryResponse,
    UpdateFrequencyResponse,
    UserActivityResponse,
)
from iris_crm.services import reporting
from iris_crm.services.supabase_service import SupabaseService, get_supabase_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

RECENT_ACTIVITY_LIMIT = 10
USER_ACTIVITY_LIMIT = 15


@router.get(
    "/summary",
    response_model=DashboardSummaryResponse,
    summary="Dashboard summary",
    description="Headline stats, pipeline by status, the 10 latest updates and rule-based insights.",
)
async def get_dashboard_summary(
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> DashboardSummaryResponse:
    """GET /api/v1/dashboard/summary"""
    try:
        accounts = await supabase.list_accounts()
        projects = await supabase.list_projects()
        updates = await supabase.list_updates(order_by="created_at")
        profiles = await supabase.list_profiles()
        now = reporting.utcnow()
        return DashboardSummaryResponse(
            stats=reporting.dashboard_stats(len(accounts), projects, updates, now),
            projects_by_status=reporting.projects_by_status(projects),
            recent_activity=reporting.recent_activity(
                updates,
                reporting.index_by_id(projects),
                reporting.index_by_id(accounts),
                reporting.index_by_id(profiles),
                limit=RECENT_ACTIVITY_LIMIT,
            ),
            insights=reporting.generate_insights(projects, updates, now),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Dashboard summary failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load dashboard",
        )


@router.get(
    "/user-activity",
    response_model=UserActivityResponse,
    summary="User activity",
    description="The 15 latest updates (by creation time), optionally for one author.",
)
async def get_user_activity(
    created_by: Optional[str] = Query(None, description="Profile id of the author"),
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> UserActivityResponse:
    """GET /api/v1/dashboard/user-activity"""
    try:
        updates = await supabase.list_updates(
            order_by="created_at",
            limit=USER_ACTIVITY_LIMIT,
            created_by=created_by or None,
        )
        projects = await supabase.list_projects()
        accounts = await supabase.list_accounts()
        profiles = await supabase.list_profiles()
        return UserActivityResponse(
            updates=reporting.update_responses(
                updates,
                reporting.index_by_id(projects),
                reporting.index_by_id(accounts),
                reporting.index_by_id(profiles),
            )
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("User activity failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load user activity",
        )


@router.get(
    "/update-frequency",
    response_model=UpdateFrequencyResponse,
    summary="Update frequency",
    description="Update counts per author: all time, last 7 days and last 30 days.",
)
async def get_update_frequency(
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> UpdateFrequencyResponse:
    """GET /api/v1/dashboard/update-frequency"""
    try:
        updates = await supabase.list_updates(order_by="created_at")
        profiles = await supabase.list_profiles()
        return UpdateFrequencyResponse(
            users=reporting.update_frequency(updates, reporting.index_by_id(profiles))
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Update frequency failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load update frequency",
        )
