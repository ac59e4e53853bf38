"""
create-pin-auth: provision the Supabase Auth user behind a PIN profile.
Mounted at the app root and under /functions/v1 so the frontend can call it like an edge function.
Responses use {"error": ...} / {"success": true, "user_id": ...} rather than {"detail": ...}.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from iris_crm.models.profile import is_valid_pin
from iris_crm.schemas.auth import PinAuthFailure, PinAuthSuccess
from iris_crm.services.supabase_service import PinAuthError, SupabaseService, get_supabase_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["functions"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=PinAuthFailure(error=message).model_dump())


@router.post(
    "/create-pin-auth",
    response_model=PinAuthSuccess,
    responses={
        400: {"model": PinAuthFailure},
        401: {"model": PinAuthFailure},
        500: {"model": PinAuthFailure},
    },
)
async def create_pin_auth(
    request: Request,
    supabase: SupabaseService = Depends(get_supabase_service),
):
    """Create (or return) the auth identity linked to the profile holding `pin`."""
    try:
        try:
            body = await request.json()
        except ValueError:
            logger.warning("create-pin-auth: request body is not valid JSON")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

        pin = body.get("pin") if isinstance(body, dict) else None
        if not is_valid_pin(pin):
            return _error(status.HTTP_400_BAD_REQUEST, "Invalid PIN format")

        profile = await supabase.get_profile_by_pin(pin)
        if not profile:
            return _error(status.HTTP_401_UNAUTHORIZED, "Invalid PIN")

        if profile.get("user_id"):
            return PinAuthSuccess(user_id=str(profile["user_id"]))

        try:
            user_id = await supabase.create_pin_auth_user(pin, profile.get("name"))
            await supabase.link_profile_user(pin, user_id)
        except PinAuthError as e:
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message)

        logger.info("create-pin-auth: linked auth user to profile %s", profile.get("id"))
        return PinAuthSuccess(user_id=user_id)
    except Exception as e:
        logger.exception("create-pin-auth error: %s", e)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
