"""
LLM provider gateway (OpenRouter, Gemini).
Forwards a JSON request with the caller's key, retries on 429/5xx.
"""

import logging
import time
from typing import Any

import requests

from iris_crm.core.config import get_settings

logger = logging.getLogger(__name__)

PROVIDER_BASE_URLS = {
    "openrouter": "https://openrouter.ai/api/v1",
    "gemini": "https://generativelanguage.googleapis.com/v1beta",
}
APP_TITLE = "Iris KAM CRM"


class LLMGatewayError(Exception):
    """Raised when a provider call cannot be made or the provider rejects it."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: Any = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class MissingAPIKeyError(LLMGatewayError):
    """No key for the provider, neither on the profile nor in server configuration."""


def resolve_api_key(service: str, profile: dict[str, Any] | None = None) -> str:
    """Profile key first (OpenRouter only), then the server-wide fallback."""
    settings = get_settings()
    if service == "openrouter":
        key = ((profile or {}).get("openrouter_api_key") or "").strip()
        return key or settings.openrouter_api_key
    if service == "gemini":
        return settings.gemini_api_key
    raise LLMGatewayError(f"Unsupported LLM service: {service}")


class LLMGatewayService:
    """
    Thin client over the provider REST APIs. One instance per request; the key is fixed
    at construction.
    """

    def __init__(self, service: str, api_key: str | None) -> None:
        if service not in PROVIDER_BASE_URLS:
            raise LLMGatewayError(f"Unsupported LLM service: {service}")
        if not api_key:
            env_name = "OPENROUTER_API_KEY" if service == "openrouter" else "GEMINI_API_KEY"
            raise MissingAPIKeyError(
                f"{service} API key not configured. Save one in your profile or set {env_name}."
            )
        self._service = service
        self._api_key = api_key
        self._base_url = PROVIDER_BASE_URLS[service]
        self._referer = get_settings().frontend_url
        self._max_retries = 2
        self._retry_status_codes = (429, 500, 502, 503)

    @property
    def service(self) -> str:
        return self._service

    def _get_headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._service == "openrouter":
            headers["Authorization"] = f"Bearer {self._api_key}"
            headers["HTTP-Referer"] = self._referer
            headers["X-Title"] = APP_TITLE
        if extra:
            headers.update(extra)
        return headers

    def _get_params(self) -> dict[str, str] | None:
        if self._service == "gemini":
            return {"key": self._api_key}
        return None

    def _handle_error(self, response: requests.Response) -> None:
        """Raise LLMGatewayError carrying the provider's error.message when it sends one."""
        try:
            body = response.json()
        except ValueError:
            body = response.text or None
        message = None
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                message = error.get("message")
            elif isinstance(error, str):
                message = error
        if not message:
            message = f"API request failed with status {response.status_code}: {response.reason}"
        raise LLMGatewayError(message, status_code=response.status_code, detail=body)

    def request(
        self,
        endpoint: str,
        method: str = "POST",
        body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        retries: int | None = None,
    ) -> Any:
        """Call `endpoint` (path under the provider base URL) and return the decoded JSON."""
        retries = self._max_retries if retries is None else retries
        url = f"{self._base_url}/{endpoint.lstrip('/')}"
        request_headers = self._get_headers(headers)
        last_exc: Exception | None = None

        for attempt in range(retries + 1):
            try:
                resp = requests.request(
                    method=method,
                    url=url,
                    headers=request_headers,
                    params=self._get_params(),
                    json=body if method != "GET" else None,
                    timeout=60,
                )
            except requests.RequestException as e:
                last_exc = e
                logger.warning("%s request failed (attempt %d): %s", self._service, attempt + 1, e)
                if attempt < retries:
                    time.sleep(2 ** attempt)
                continue

            if resp.ok:
                if resp.status_code == 204 or not resp.content:
                    return {}
                return resp.json()

            if resp.status_code in self._retry_status_codes and attempt < retries:
                retry_after = resp.headers.get("Retry-After")
                wait = float(retry_after) if retry_after and retry_after.isdigit() else (2 ** attempt)
                logger.warning(
                    "%s %s %s (attempt %d), retrying in %.1fs",
                    self._service,
                    resp.status_code,
                    resp.reason,
                    attempt + 1,
                    wait,
                )
                time.sleep(wait)
                continue

            self._handle_error(resp)

        if last_exc:
            raise LLMGatewayError(
                f"{self._service} request failed after {retries + 1} attempts: {last_exc!s}"
            ) from last_exc
        raise LLMGatewayError(f"{self._service} request failed unexpectedly")
