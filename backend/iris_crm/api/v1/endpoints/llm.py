"""
LLM gateway endpoint: forwards a JSON request to OpenRouter or Gemini with the caller's key.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from iris_crm.core.security import get_current_profile
from iris_crm.schemas.llm import LLMRequest, LLMResponse
from iris_crm.services.llm_gateway import (
    LLMGatewayError,
    LLMGatewayService,
    MissingAPIKeyError,
    resolve_api_key,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/llm", tags=["llm"])


@router.post(
    "/request",
    response_model=LLMResponse,
    summary="Proxy an LLM request",
    description="Send `body` to `endpoint` on the chosen provider. Uses the profile's key, else the server key.",
)
async def proxy_request(
    body: LLMRequest,
    profile: dict[str, Any] = Depends(get_current_profile),
) -> LLMResponse:
    """POST /api/v1/llm/request"""
    try:
        gateway = LLMGatewayService(body.service, resolve_api_key(body.service, profile))
        data = await run_in_threadpool(
            gateway.request,
            body.endpoint,
            method=body.method,
            body=body.body,
            headers=body.headers,
        )
        return LLMResponse(service=body.service, data=data)
    except MissingAPIKeyError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    except LLMGatewayError as e:
        logger.warning("LLM gateway error (%s): %s", body.service, e.message)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message,
        )
