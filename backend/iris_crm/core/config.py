"""
Application configuration from environment variables.
Settings class using pydantic-settings with optional validation.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from backend root so it loads when running from backend/ or project root
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"

DEFAULT_CORS_ORIGIN = "http://localhost:3000"


class Settings(BaseSettings):
    """
    Application settings loaded from environment and .env.
    Supabase credentials are required; everything else has a local-dev default.
    """

    # Supabase
    SUPABASE_URL: str
    SUPABASE_ANON_KEY: str
    SUPABASE_SERVICE_KEY: str

    # Application
    ENVIRONMENT: str = "development"
    # Store as string so env never triggers json.loads; parsed in cors_origins_list.
    cors_origins: str = Field(
        default=DEFAULT_CORS_ORIGIN,
        description="Comma-separated origins or JSON array",
        validation_alias="CORS_ORIGINS",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def normalize_cors_origins(cls, v: object) -> str:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_CORS_ORIGIN
        if isinstance(v, list):
            return ",".join(str(x).strip() for x in v if str(x).strip())
        return str(v).strip()

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    frontend_url: str = Field(
        default=DEFAULT_CORS_ORIGIN,
        description="Frontend app URL (sent as HTTP-Referer to OpenRouter)",
        validation_alias="FRONTEND_URL",
    )

    # Session tokens issued after PIN login
    jwt_secret: str = Field(
        default="change-me-in-production-use-env",
        validation_alias="JWT_SECRET",
    )
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=720,
        ge=1,
        validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # PIN auth identities
    pin_auth_email_domain: str = Field(
        default="iris.internal",
        description="Domain of the synthetic email created for each PIN",
        validation_alias="PIN_AUTH_EMAIL_DOMAIN",
    )
    pin_auth_provisioning: Literal["admin_api", "rpc"] = Field(
        default="admin_api",
        description="admin_api: auth.admin.create_user; rpc: create_auth_user_for_pin()",
        validation_alias="PIN_AUTH_PROVISIONING",
    )

    # LLM providers (server-wide fallbacks for per-profile keys)
    openrouter_api_key: str = Field(default="", validation_alias="OPENROUTER_API_KEY")
    gemini_api_key: str = Field(default="", validation_alias="GEMINI_API_KEY")

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS from comma-separated or JSON array string."""
        raw = (self.cors_origins or "").strip()
        if not raw:
            return [DEFAULT_CORS_ORIGIN]
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
            except ValueError:
                parsed = None
            if isinstance(parsed, list):
                return [x.strip() for x in parsed if isinstance(x, str) and x.strip()]
        return [x.strip() for x in raw.split(",") if x.strip()] or [DEFAULT_CORS_ORIGIN]

    @field_validator("frontend_url", "pin_auth_email_domain", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v

    def validate_for_production(self) -> None:
        """
        Call to validate that required env vars are set (e.g. on startup in production).
        Raises ValueError with missing keys.
        """
        missing: List[str] = []
        if not self.SUPABASE_URL:
            missing.append("SUPABASE_URL")
        if not self.SUPABASE_ANON_KEY:
            missing.append("SUPABASE_ANON_KEY")
        if not self.SUPABASE_SERVICE_KEY:
            missing.append("SUPABASE_SERVICE_KEY")
        if not self.jwt_secret or self.jwt_secret.startswith("change-me"):
            missing.append("JWT_SECRET")
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
