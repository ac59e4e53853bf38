"""
Supabase client: PIN profiles and auth identities, accounts, projects, updates.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from supabase import Client, create_client

from iris_crm.core.config import get_settings

logger = logging.getLogger(__name__)

PROFILE_LIST_COLUMNS = "id, name, pin, Type"


class PinAuthError(Exception):
    """Raised when an auth identity cannot be created or linked for a PIN profile."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class SupabaseService:
    def __init__(self, client: Optional[Client] = None) -> None:
        settings = get_settings()
        self.settings = settings
        self.client: Client = client or create_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_KEY,
        )

    # -------------------------------------------------------------------------
    # Profiles (profiles table)
    # -------------------------------------------------------------------------

    async def get_profile(self, profile_id: str) -> Optional[Dict[str, Any]]:
        """Get profile by id, or None."""
        try:
            response = (
                self.client.table("profiles")
                .select("*")
                .eq("id", profile_id)
                .execute()
            )
            if response.data and len(response.data) > 0:
                return response.data[0]
            return None
        except Exception as e:
            logger.error("Get profile error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load profile",
            )

    async def get_profile_by_pin(self, pin: str) -> Optional[Dict[str, Any]]:
        """Return the single profile holding this PIN. None if no row or the PIN is ambiguous."""
        try:
            response = (
                self.client.table("profiles")
                .select("*")
                .eq("pin", pin)
                .limit(2)
                .execute()
            )
        except Exception as e:
            logger.error("Get profile by PIN error: %s", str(e))
            return None
        rows = response.data or []
        if len(rows) != 1:
            if rows:
                logger.warning("PIN lookup matched %d profiles; refusing sign-in", len(rows))
            return None
        return rows[0]

    async def list_profiles(self) -> List[Dict[str, Any]]:
        """All profiles (id, name, pin, Type) ordered by name."""
        try:
            response = (
                self.client.table("profiles")
                .select(PROFILE_LIST_COLUMNS)
                .order("name")
                .execute()
            )
            return list(response.data) if response.data else []
        except Exception as e:
            logger.error("List profiles error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load users",
            )

    async def update_profile(self, profile_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update profile columns (name, API keys)."""
        try:
            response = (
                self.client.table("profiles")
                .update(data)
                .eq("id", profile_id)
                .execute()
            )
            if response.data and len(response.data) > 0:
                return response.data[0]
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Profile not found",
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error("Update profile error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update profile",
            )

    async def create_profile(self, name: str, pin: str, is_admin: bool = False) -> str:
        """Create a profile through the create_user_profile() stored function. Returns the new id."""
        try:
            response = self.client.rpc(
                "create_user_profile",
                {"user_name": name, "user_pin": pin, "is_admin": is_admin},
            ).execute()
        except Exception as e:
            logger.error("Create profile error: %s", str(e))
            if "duplicate" in str(e).lower() or "unique" in str(e).lower():
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="PIN already in use",
                )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create user",
            )
        if not response.data:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create user",
            )
        return str(response.data)

    # -------------------------------------------------------------------------
    # PIN auth identities (Supabase Auth users backing each profile)
    # -------------------------------------------------------------------------

    def pin_email(self, pin: str) -> str:
        return f"pin_{pin}@{self.settings.pin_auth_email_domain}"

    async def create_pin_auth_user(self, pin: str, name: Optional[str]) -> str:
        """Create the auth user for a PIN. Returns the auth user id."""
        if self.settings.pin_auth_provisioning == "rpc":
            try:
                response = self.client.rpc(
                    "create_auth_user_for_pin",
                    {"pin_value": pin},
                ).execute()
            except Exception as e:
                logger.error("Auth user creation (rpc) error: %s", str(e))
                raise PinAuthError("Failed to create auth user", cause=e)
            if not response.data:
                raise PinAuthError("Failed to create auth user")
            return str(response.data)

        try:
            response = self.client.auth.admin.create_user(
                {
                    "email": self.pin_email(pin),
                    "password": pin,
                    "email_confirm": True,
                    "user_metadata": {
                        "pin": pin,
                        "name": name,
                    },
                }
            )
        except Exception as e:
            logger.error("Auth user creation error: %s", str(e))
            raise PinAuthError("Failed to create auth user", cause=e)
        if not response or not response.user:
            raise PinAuthError("Failed to create auth user")
        return str(response.user.id)

    async def link_profile_user(self, pin: str, user_id: str) -> None:
        """Store the auth user id on the profile holding this PIN."""
        try:
            (
                self.client.table("profiles")
                .update({"user_id": user_id})
                .eq("pin", pin)
                .execute()
            )
        except Exception as e:
            logger.error("Profile update error: %s", str(e))
            raise PinAuthError("Failed to link profile", cause=e)

    async def ensure_pin_auth_identity(self, profile: Dict[str, Any]) -> str:
        """
        Return the auth user id backing this profile, creating and linking one on first use.
        Raises PinAuthError if creation or linking fails.
        """
        if profile.get("user_id"):
            return str(profile["user_id"])
        pin = profile["pin"]
        user_id = await self.create_pin_auth_user(pin, profile.get("name"))
        await self.link_profile_user(pin, user_id)
        logger.info("Linked new auth identity to profile %s", profile.get("id"))
        return user_id

    # -------------------------------------------------------------------------
    # Accounts (accounts table)
    # -------------------------------------------------------------------------

    async def list_accounts(self) -> List[Dict[str, Any]]:
        """All accounts ordered by name."""
        try:
            response = self.client.table("accounts").select("*").order("name").execute()
            return list(response.data) if response.data else []
        except Exception as e:
            logger.error("List accounts error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load accounts",
            )

    async def get_account(self, account_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = (
                self.client.table("accounts")
                .select("*")
                .eq("id", account_id)
                .execute()
            )
            if response.data and len(response.data) > 0:
                return response.data[0]
            return None
        except Exception as e:
            logger.error("Get account error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load account",
            )

    async def create_account(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.client.table("accounts").insert(data).execute()
            if response.data and len(response.data) > 0:
                return response.data[0]
        except Exception as e:
            logger.error("Create account error: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create account",
        )

    async def update_account(self, account_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = (
                self.client.table("accounts")
                .update(data)
                .eq("id", account_id)
                .execute()
            )
            if response.data and len(response.data) > 0:
                return response.data[0]
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Account not found",
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error("Update account error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update account",
            )

    async def delete_account(self, account_id: str) -> None:
        """Delete an account. Projects referencing it must be removed first (FK)."""
        try:
            response = (
                self.client.table("accounts")
                .delete()
                .eq("id", account_id)
                .execute()
            )
        except Exception as e:
            logger.error("Delete account error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to delete account",
            )
        if not response.data:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Account not found",
            )

    # -------------------------------------------------------------------------
    # Projects (projects table)
    # -------------------------------------------------------------------------

    async def list_projects(self, account_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Projects newest first, optionally for one account."""
        try:
            q = self.client.table("projects").select("*")
            if account_id:
                q = q.eq("account_id", account_id)
            response = q.order("created_at", desc=True).execute()
            return list(response.data) if response.data else []
        except Exception as e:
            logger.error("List projects error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load projects",
            )

    async def get_project(self, project_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = (
                self.client.table("projects")
                .select("*")
                .eq("id", project_id)
                .execute()
            )
            if response.data and len(response.data) > 0:
                return response.data[0]
            return None
        except Exception as e:
            logger.error("Get project error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load project",
            )

    async def create_project(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.client.table("projects").insert(data).execute()
            if response.data and len(response.data) > 0:
                return response.data[0]
        except Exception as e:
            logger.error("Create project error: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create project",
        )

    async def update_project(self, project_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = (
                self.client.table("projects")
                .update(data)
                .eq("id", project_id)
                .execute()
            )
            if response.data and len(response.data) > 0:
                return response.data[0]
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Project not found",
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error("Update project error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update project",
            )

    async def delete_project(self, project_id: str) -> None:
        try:
            response = (
                self.client.table("projects")
                .delete()
                .eq("id", project_id)
                .execute()
            )
        except Exception as e:
            logger.error("Delete project error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to delete project",
            )
        if not response.data:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Project not found",
            )

    # -------------------------------------------------------------------------
    # Updates (updates table)
    # -------------------------------------------------------------------------

    async def list_updates(
        self,
        order_by: str = "date",
        limit: Optional[int] = None,
        created_by: Optional[str] = None,
        project_ids: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Updates newest first by `order_by` (date or created_at), with optional filters."""
        if project_ids is not None and not project_ids:
            return []
        try:
            q = self.client.table("updates").select("*")
            if created_by:
                q = q.eq("created_by", created_by)
            if project_ids is not None:
                q = q.in_("project_id", project_ids)
            q = q.order(order_by, desc=True)
            if limit:
                q = q.limit(limit)
            response = q.execute()
            return list(response.data) if response.data else []
        except Exception as e:
            logger.error("List updates error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load updates",
            )

    async def get_update(self, update_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = (
                self.client.table("updates")
                .select("*")
                .eq("id", update_id)
                .execute()
            )
            if response.data and len(response.data) > 0:
                return response.data[0]
            return None
        except Exception as e:
            logger.error("Get update error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load update",
            )

    async def create_update(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.client.table("updates").insert(data).execute()
            if response.data and len(response.data) > 0:
                return response.data[0]
        except Exception as e:
            logger.error("Create update error: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create update",
        )

    async def update_update(self, update_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = (
                self.client.table("updates")
                .update(data)
                .eq("id", update_id)
                .execute()
            )
            if response.data and len(response.data) > 0:
                return response.data[0]
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Update not found",
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error("Edit update error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to edit update",
            )

    async def delete_update(self, update_id: str) -> None:
        try:
            response = (
                self.client.table("updates")
                .delete()
                .eq("id", update_id)
                .execute()
            )
        except Exception as e:
            logger.error("Delete update error: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to delete update",
            )
        if not response.data:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Update not found",
            )


def get_supabase_service() -> SupabaseService:
    """Dependency for FastAPI."""
    return SupabaseService()
