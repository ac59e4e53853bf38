"""
Auth API: PIN sign in, sign out, me.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from iris_crm.core.config import get_settings
from iris_crm.core.security import create_access_token, get_current_profile, get_current_user
from iris_crm.schemas.auth import AuthResponse, PinLoginRequest
from iris_crm.schemas.common import MessageResponse
from iris_crm.schemas.profile import ProfileResponse
from iris_crm.services.supabase_service import PinAuthError, SupabaseService, get_supabase_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/pin-login", response_model=AuthResponse)
async def pin_login(
    request: PinLoginRequest,
    supabase: SupabaseService = Depends(get_supabase_service),
):
    """
    Sign in with a 6-digit PIN.

    - **pin**: exactly six digits

    The first sign in for a profile also provisions its auth identity.
    """
    profile = await supabase.get_profile_by_pin(request.pin)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid PIN",
        )

    try:
        auth_user_id = await supabase.ensure_pin_auth_identity(profile)
    except PinAuthError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message,
        )
    profile = {**profile, "user_id": auth_user_id}

    settings = get_settings()
    expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expires_at = datetime.now(timezone.utc) + expires_delta
    access_token = create_access_token(
        {"sub": str(profile["id"]), "pin_user_id": auth_user_id},
        expires_delta=expires_delta,
    )
    logger.info("PIN sign in for profile %s", profile["id"])

    return AuthResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=int(expires_delta.total_seconds()),
        expires_at=int(expires_at.timestamp()),
        user=ProfileResponse.from_row(profile),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: Dict[str, Any] = Depends(get_current_user),
):
    """
    Sign out. Tokens are stateless; the client discards its copy.
    Requires authentication.
    """
    return MessageResponse(
        message="Successfully signed out",
        success=True,
    )


@router.get("/me", response_model=ProfileResponse)
async def get_me(
    profile: Dict[str, Any] = Depends(get_current_profile),
):
    """
    Get current user's profile.
    Requires authentication.
    """
    return ProfileResponse.from_row(profile)
