"""Public image operations.

Architectural role:
    Sits between adapters (HTTP/CLI) and the gateway. Each operation validates
    its inputs by constructing a request, builds the instruction, and awaits a
    single gateway submission.

Control flow (per call):
    1. Construct the operation request (validation; may raise
       `ValidationError` before any remote call).
    2. `build_instruction(request)`.
    3. `gateway.submit(request.image, instruction)`.
    4. Return the resulting `ImagePayload`.

Error handling strategy:
    Nothing is caught here. Validation, empty-response and remote failures
    reach the caller unchanged.

Concurrency:
    Stateless per call. The default gateway is created lazily and shared; it
    holds no per-call state.
"""

import logging
import time

from imagelab.core.types import (
    CompressRequest,
    ImagePayload,
    OperationRequest,
    RemoveBackgroundRequest,
    UpscaleRequest,
)
from imagelab.image.gateway import ImageGateway
from imagelab.prompting.instruction_builder import build_instruction


logger = logging.getLogger(__name__)

_DEFAULT_GATEWAY: ImageGateway | None = None


def set_gateway(gateway: ImageGateway | None) -> None:
    """Override or clear the default gateway used by the public operations.

    Passing `None` makes the next call build a fresh Gemini-backed gateway.
    """
    global _DEFAULT_GATEWAY
    _DEFAULT_GATEWAY = gateway


def get_gateway() -> ImageGateway:
    """Lazily instantiate and cache the default Gemini-backed gateway."""
    global _DEFAULT_GATEWAY
    if _DEFAULT_GATEWAY is None:
        from imagelab.image.client import GeminiImageClient

        _DEFAULT_GATEWAY = ImageGateway(GeminiImageClient())
    return _DEFAULT_GATEWAY


async def run_operation(
    request: OperationRequest,
    gateway: ImageGateway | None = None,
) -> ImagePayload:
    """Execute one already-constructed operation request.

    Args:
        request: Validated operation request.
        gateway: Explicit gateway; defaults to `get_gateway()`.

    Returns:
        The image produced by the model.
    """
    instruction = build_instruction(request)
    active_gateway = gateway or get_gateway()

    logger.info("Running %s", request.operation)
    started = time.perf_counter()
    result = await active_gateway.submit(request.image, instruction)
    logger.info(
        "%s finished in %.2fs (%s)",
        request.operation,
        time.perf_counter() - started,
        result.image.mime_type,
    )
    return result.image


async def remove_background(image, intensity="standard", gateway=None) -> ImagePayload:
    """Remove the background of `image` (an `ImagePayload` or data URI)."""
    request = RemoveBackgroundRequest(image=image, intensity=intensity)
    return await run_operation(request, gateway=gateway)


async def upscale(image, scale, gateway=None) -> ImagePayload:
    """Upscale `image` by `2x` or `4x`."""
    request = UpscaleRequest(image=image, scale=scale)
    return await run_operation(request, gateway=gateway)


async def compress(image, target_size_mb, gateway=None) -> ImagePayload:
    """Compress `image` below `target_size_mb` megabytes (must be > 0)."""
    request = CompressRequest(image=image, target_size_mb=target_size_mb)
    return await run_operation(request, gateway=gateway)
