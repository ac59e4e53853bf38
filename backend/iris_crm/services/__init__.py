# Services: Supabase, LLM gateway, reporting

from iris_crm.services.llm_gateway import (
    LLMGatewayError,
    LLMGatewayService,
    MissingAPIKeyError,
    resolve_api_key,
)
from iris_crm.services.supabase_service import (
    PinAuthError,
    SupabaseService,
    get_supabase_service,
)

__all__ = [
    "LLMGatewayError",
    "LLMGatewayService",
    "MissingAPIKeyError",
    "resolve_api_key",
    "PinAuthError",
    "SupabaseService",
    "get_supabase_service",
]
