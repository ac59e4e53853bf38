"""
Profiles: user list for author filters, own name and API keys, admin user creation.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from iris_crm.core.security import get_current_profile, get_current_user_id, require_admin
from iris_crm.models.profile import profile_display_name
from iris_crm.schemas.profile import (
    ApiKeysUpdate,
    ProfileCreate,
    ProfileCreatedResponse,
    ProfileResponse,
    ProfileUpdate,
    UserListResponse,
    UserSummary,
)
from iris_crm.services.supabase_service import SupabaseService, get_supabase_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("", response_model=UserListResponse)
async def list_users(
    supabase: SupabaseService = Depends(get_supabase_service),
    _user_id: str = Depends(get_current_user_id),
) -> UserListResponse:
    """GET /api/v1/profiles: all users ordered by name (id and display name only)."""
    rows = await supabase.list_profiles()
    return UserListResponse(
        users=[
            UserSummary(
                id=str(r["id"]),
                name=r.get("name"),
                display_name=profile_display_name(r.get("name"), r.get("pin")),
            )
            for r in rows
        ]
    )


@router.post("", response_model=ProfileCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: ProfileCreate,
    supabase: SupabaseService = Depends(get_supabase_service),
    _admin: dict[str, Any] = Depends(require_admin),
) -> ProfileCreatedResponse:
    """POST /api/v1/profiles: admin only. Creates a PIN profile via create_user_profile()."""
    new_id = await supabase.create_profile(body.name, body.pin, is_admin=body.is_admin)
    logger.info("Profile %s created by admin %s", new_id, _admin.get("id"))
    return ProfileCreatedResponse(id=new_id)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    profile: dict[str, Any] = Depends(get_current_profile),
) -> ProfileResponse:
    return ProfileResponse.from_row(profile)


@router.patch("/me", response_model=ProfileResponse)
async def update_my_profile(
    body: ProfileUpdate,
    supabase: SupabaseService = Depends(get_supabase_service),
    user_id: str = Depends(get_current_user_id),
) -> ProfileResponse:
    """PATCH /api/v1/profiles/me: change own display name."""
    try:
        row = await supabase.update_profile(user_id, {"name": body.name})
        return ProfileResponse.from_row(row)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Update profile failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile",
        ) from e


@router.put("/me/api-keys", response_model=ProfileResponse)
async def update_my_api_keys(
    body: ApiKeysUpdate,
    supabase: SupabaseService = Depends(get_supabase_service),
    user_id: str = Depends(get_current_user_id),
) -> ProfileResponse:
    """PUT /api/v1/profiles/me/api-keys: store or clear (blank) own provider keys."""
    row = await supabase.update_profile(
        user_id,
        {
            "openrouter_api_key": body.openrouter_api_key,
            "deepseek_api_key": body.deepseek_api_key,
        },
    )
    logger.info("API keys updated for profile %s", user_id)
    return ProfileResponse.from_row(row)
