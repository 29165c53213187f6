"""Image operation gateway.

Role in pipeline:
    - Receives one image plus one instruction string.
    - Builds a single multimodal generation request asking for text and image
      output.
    - Awaits exactly one model response and unwraps the first image part.

Response unwrapping:
    Parts are scanned in candidate order. The first part carrying inline image
    data is repackaged as an `ImagePayload` with the MIME type and base64 body
    the service returned. Text parts are discarded.

Error handling strategy:
    - No image part -> `EmptyResponse`.
    - Anything raised by the model transport propagates unmodified.
    - No retry, no caching, no fallback.

Concurrency:
    The gateway keeps no per-call state. Concurrent `submit` calls share only
    the (stateless) model object and resolve independently.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from imagelab.core.errors import EmptyResponse
from imagelab.core.types import ImagePayload, OperationResult
from imagelab.image.provider_config import RESPONSE_MODALITIES


logger = logging.getLogger(__name__)

DEFAULT_RESPONSE_MIME_TYPE = "image/png"


class ImageModelProtocol(Protocol):
    """Minimal async interface the gateway needs from a model transport."""

    async def generate_content(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Submit one generation payload and return the raw response body."""
        ...


def build_payload(image: ImagePayload, instruction: str) -> dict[str, Any]:
    """Assemble the generateContent body: image part first, then instruction."""
    return {
        "contents": [
            {
                "role": "user",
                "parts": [
                    {"inlineData": {"mimeType": image.mime_type, "data": image.data}},
                    {"text": instruction},
                ],
            }
        ],
        "generationConfig": {"responseModalities": list(RESPONSE_MODALITIES)},
    }


def _iter_parts(response: dict[str, Any]):
    for candidate in response.get("candidates") or []:
        if not isinstance(candidate, dict):
            continue
        content = candidate.get("content")
        if not isinstance(content, dict):
            continue
        parts = content.get("parts")
        if not isinstance(parts, list):
            continue
        for part in parts:
            if isinstance(part, dict):
                yield part


def extract_first_image(response: dict[str, Any]) -> ImagePayload | None:
    """Return the first inline image part of a response, or `None`."""
    if not isinstance(response, dict):
        return None

    for part in _iter_parts(response):
        inline = part.get("inlineData") or part.get("inline_data")
        if not isinstance(inline, dict) or not inline.get("data"):
            if part.get("text"):
                logger.debug("Discarding text part (%d chars)", len(part["text"]))
            continue
        mime_type = (
            inline.get("mimeType")
            or inline.get("mime_type")
            or DEFAULT_RESPONSE_MIME_TYPE
        )
        return ImagePayload(mime_type=mime_type, data=inline["data"])

    return None


class ImageGateway:
    """Submit image+instruction requests to a multimodal model."""

    def __init__(self, model: ImageModelProtocol) -> None:
        self.model = model

    async def submit(self, image: ImagePayload, instruction: str) -> OperationResult:
        """Issue one remote call and unwrap its image output.

        Args:
            image: Validated input image.
            instruction: Instruction text from the prompting layer.

        Returns:
            `OperationResult` wrapping the first returned image, unmodified.

        Raises:
            EmptyResponse: The response had no image content.
            Exception: Whatever the model transport raised, unchanged.
        """
        payload = build_payload(image, instruction)
        response = await self.model.generate_content(payload)

        result_image = extract_first_image(response)
        if result_image is None:
            logger.warning("Model response contained no image content")
            raise EmptyResponse()

        return OperationResult(image=result_image)
