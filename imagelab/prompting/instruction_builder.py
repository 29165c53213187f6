"""Instruction text for each image operation.

This module only turns an already validated operation request into the
natural-language instruction sent alongside the image. Validation, transport
and response handling happen elsewhere.

Design constraints:
    - Deterministic: identical requests produce byte-identical text.
    - No I/O and no global state mutation.
    - Never raises for in-domain requests. Out-of-domain values are rejected
      when the request is constructed.
"""

from decimal import Decimal

from imagelab.core.types import (
    CompressRequest,
    Intensity,
    OperationRequest,
    RemoveBackgroundRequest,
    UpscaleRequest,
)


# =========================================================
# BACKGROUND REMOVAL
# =========================================================

REMOVE_BACKGROUND_INSTRUCTIONS = {
    Intensity.SUBTLE: (
        "Gently remove the background from this image, preserving as much of "
        "the main subject as possible, including fine details like hair. The "
        "result should have clean, soft edges."
    ),
    Intensity.STANDARD: "Remove the background from this image.",
    Intensity.AGGRESSIVE: (
        "Aggressively and completely remove the background from this image. "
        "Create a very clean, sharp cutout of the main subject, even if it "
        "means some fine details are lost. Prioritize complete background "
        "removal."
    ),
}


def build_remove_background_instruction(intensity: Intensity) -> str:
    return REMOVE_BACKGROUND_INSTRUCTIONS[Intensity(intensity)]


# =========================================================
# UPSCALE
# =========================================================

def build_upscale_instruction(scale) -> str:
    # Factor is stated literally ("2x" / "4x").
    return f"Upscale this image by {getattr(scale, 'value', scale)}"


# =========================================================
# COMPRESSION
# =========================================================

def format_size_mb(value) -> str:
    """Render a megabyte target without rounding.

    Integral values drop the decimal point (`4.0` -> `4`); everything else uses
    the shortest exact representation in plain notation (`2.5`, `0.00001`).
    """
    if isinstance(value, int):
        return str(value)
    if float(value).is_integer():
        return str(int(value))
    return format(Decimal(repr(float(value))), "f")


def build_compress_instruction(target_size_mb) -> str:
    return (
        f"Compress this image to be under {format_size_mb(target_size_mb)}MB "
        "while maintaining the best possible quality. The output must be a "
        "web-friendly format like PNG or JPEG."
    )


# =========================================================
# DISPATCH
# =========================================================

def build_instruction(request: OperationRequest) -> str:
    """Return the instruction string for one operation request.

    Args:
        request: A validated `RemoveBackgroundRequest`, `UpscaleRequest` or
            `CompressRequest`.

    Returns:
        Instruction text to pair with the request image.

    Raises:
        TypeError: When called with something that is not an operation request.
            This is a caller contract violation, not a domain error.
    """
    if isinstance(request, RemoveBackgroundRequest):
        return build_remove_background_instruction(request.intensity)

    if isinstance(request, UpscaleRequest):
        return build_upscale_instruction(request.scale)

    if isinstance(request, CompressRequest):
        return build_compress_instruction(request.target_size_mb)

    raise TypeError(f"Unsupported operation request: {type(request).__name__}")
