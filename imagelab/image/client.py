"""Gemini transport client for image-editing requests.

Processing flow:
    1. Resolve the API key (environment first, then key file).
    2. POST the generateContent payload to the configured model endpoint.
    3. Return the parsed JSON response unchanged.

Retry behavior:
    None. Each call is attempted once with `IMAGE_TIMEOUT_SECONDS` as the
    transport timeout.

Error handling strategy:
    - Missing key -> `RemoteError`.
    - Non-2xx status -> `RemoteError` with the status code.
    - Transport failures -> `RemoteError`.
    The original `httpx` exception is chained as `__cause__`. Messages never
    include the request body or provider response text.

Cancellation:
    The HTTP client is opened per call inside `async with`, so abandoning the
    awaiting task closes the connection.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from imagelab.core.errors import RemoteError
from imagelab.image.provider_config import (
    GEMINI_KEY_FILE,
    IMAGE_MODEL_NAME,
    IMAGE_TIMEOUT_SECONDS,
    PROVIDER,
    load_key,
    model_url,
)


logger = logging.getLogger(__name__)


def _build_sanitized_http_error(provider_name: str, err: httpx.HTTPError) -> RemoteError:
    """Build provider-labeled HTTP error without exposing raw internals."""
    status_code = None
    if isinstance(err, httpx.HTTPStatusError) and err.response is not None:
        status_code = err.response.status_code

    label = str(provider_name or "provider").upper()
    if status_code:
        return RemoteError(
            f"{label} HTTP ERROR ({status_code})",
            provider=provider_name,
            status_code=status_code,
        )
    return RemoteError(f"{label} HTTP ERROR", provider=provider_name)


class GeminiImageClient:
    """Async client for the Gemini `generateContent` endpoint.

    Args:
        model: Model variant name. Defaults to `IMAGE_MODEL_NAME`.
        api_key: Explicit key. When omitted, resolved per call via `load_key`.
        timeout_seconds: Transport timeout for the single attempt.
        transport: Optional `httpx` transport (used by tests to mock the wire).
    """

    def __init__(
        self,
        model: str | None = None,
        api_key: str | None = None,
        timeout_seconds: float = IMAGE_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.model = model or IMAGE_MODEL_NAME
        self._api_key = api_key
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _resolve_key(self) -> str:
        api_key = self._api_key or load_key(GEMINI_KEY_FILE)
        if not api_key:
            raise RemoteError(
                f"{PROVIDER.upper()} KEY FILE NOT FOUND", provider=PROVIDER
            )
        return api_key

    async def generate_content(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Send one generateContent request and return the parsed JSON body.

        Raises:
            RemoteError: Missing key, HTTP status failure, transport failure or
                a body that is not JSON.
        """
        headers = {
            "x-goog-api-key": self._resolve_key(),
            "Content-Type": "application/json",
        }
        url = model_url(self.model)

        logger.debug("POST %s (timeout=%ss)", url, self.timeout_seconds)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(url, headers=headers, json=payload)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as err:
            raise _build_sanitized_http_error(PROVIDER, err) from err
        except ValueError as err:
            raise RemoteError(
                f"{PROVIDER.upper()} RETURNED INVALID JSON", provider=PROVIDER
            ) from err
