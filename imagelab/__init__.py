"""ImageLab: background removal, upscaling and compression via a hosted model."""

from imagelab.core.engine import compress, remove_background, run_operation, upscale
from imagelab.core.errors import EmptyResponse, ImageLabError, RemoteError, ValidationError
from imagelab.core.types import (
    CompressRequest,
    ImagePayload,
    Intensity,
    OperationResult,
    RemoveBackgroundRequest,
    Scale,
    UpscaleRequest,
)

__all__ = [
    "CompressRequest",
    "EmptyResponse",
    "ImageLabError",
    "ImagePayload",
    "Intensity",
    "OperationResult",
    "RemoteError",
    "RemoveBackgroundRequest",
    "Scale",
    "UpscaleRequest",
    "ValidationError",
    "compress",
    "remove_background",
    "run_operation",
    "upscale",
]
