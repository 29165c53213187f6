"""Data contracts shared by the prompting, gateway and adapter layers.

Architectural role:
    Defines the image value passed through every operation, the three operation
    request variants, and the single-image result.

Validation:
    All domain checks run at construction time so an invalid request never
    reaches instruction building or the remote model. Violations raise
    `ValidationError`.

Immutability:
    Every type here is a frozen dataclass. Operations produce a new
    `ImagePayload` rather than editing the input.
"""

import base64
import binascii
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from imagelab.core.errors import ValidationError


_DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[^;,]*);base64,(?P<data>.*)$", re.DOTALL)


class Intensity(str, Enum):
    """Background-removal strength."""

    SUBTLE = "subtle"
    STANDARD = "standard"
    AGGRESSIVE = "aggressive"


class Scale(str, Enum):
    """Upscale factor."""

    TWO_X = "2x"
    FOUR_X = "4x"


@dataclass(frozen=True)
class ImagePayload:
    """MIME-tagged, base64-encoded image.

    Attributes:
        mime_type: Media type such as `image/png`.
        data: Base64 body, stored exactly as received (never re-encoded).
    """

    mime_type: str
    data: str = field(repr=False)

    def __post_init__(self):
        if not isinstance(self.mime_type, str) or not self.mime_type.strip():
            raise ValidationError("Image payload is missing a MIME type")
        if not isinstance(self.data, str) or not self.data.strip():
            raise ValidationError("Image payload body is empty")

    @classmethod
    def parse(cls, data_uri: str) -> "ImagePayload":
        """Parse a `data:<mime>;base64,<body>` string.

        Raises:
            ValidationError: On a malformed URI, empty MIME type, empty body, or
                a body that is not strict base64.
        """
        if not isinstance(data_uri, str):
            raise ValidationError("Image must be a data URI string")

        match = _DATA_URI_PATTERN.match(data_uri.strip())
        if not match:
            raise ValidationError(
                "Expected format: 'data:<mimetype>;base64,<encoded_data>'"
            )

        mime_type = match.group("mime").strip()
        body = match.group("data").strip()
        if not mime_type:
            raise ValidationError("Image data URI is missing a MIME type")
        if not body:
            raise ValidationError("Image data URI has an empty body")

        payload = cls(mime_type=mime_type, data=body)
        payload.validate()
        return payload

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str) -> "ImagePayload":
        if not raw:
            raise ValidationError("Image payload body is empty")
        return cls(mime_type=mime_type, data=base64.b64encode(raw).decode("ascii"))

    def validate(self) -> None:
        """Require a body that decodes as strict base64 to at least one byte."""
        try:
            decoded = base64.b64decode(self.data, validate=True)
        except (binascii.Error, ValueError) as err:
            raise ValidationError("Image payload body is not valid base64") from err
        if not decoded:
            raise ValidationError("Image payload decodes to zero bytes")

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    def decode(self) -> bytes:
        return base64.b64decode(self.data)

    def approx_size_bytes(self) -> int:
        """Decoded size estimated from the base64 length (no decode)."""
        padding = len(self.data) - len(self.data.rstrip("="))
        return (len(self.data) * 3) // 4 - padding


def _coerce_image(value) -> ImagePayload:
    if isinstance(value, ImagePayload):
        value.validate()
        return value
    return ImagePayload.parse(value)


def _coerce_enum(enum_cls, value, label):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"Unknown {label} {value!r}; expected one of: {allowed}"
        ) from None


@dataclass(frozen=True)
class RemoveBackgroundRequest:
    image: ImagePayload
    intensity: Intensity = Intensity.STANDARD

    operation = "remove-background"

    def __post_init__(self):
        object.__setattr__(self, "image", _coerce_image(self.image))
        object.__setattr__(
            self, "intensity", _coerce_enum(Intensity, self.intensity, "intensity")
        )


@dataclass(frozen=True)
class UpscaleRequest:
    image: ImagePayload
    scale: Scale

    operation = "upscale"

    def __post_init__(self):
        object.__setattr__(self, "image", _coerce_image(self.image))
        object.__setattr__(self, "scale", _coerce_enum(Scale, self.scale, "scale"))


@dataclass(frozen=True)
class CompressRequest:
    """Compression request.

    `target_size_mb` keeps the caller's numeric type so the instruction text
    can embed it verbatim (`4` stays `4`, `2.5` stays `2.5`).
    """

    image: ImagePayload
    target_size_mb: float

    operation = "compress"

    def __post_init__(self):
        object.__setattr__(self, "image", _coerce_image(self.image))
        value = self.target_size_mb
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"target_size_mb must be a number, got {value!r}")
        if math.isnan(value) or math.isinf(value):
            raise ValidationError("target_size_mb must be finite")
        if value <= 0:
            raise ValidationError(f"target_size_mb must be > 0, got {value!r}")


OperationRequest = Union[RemoveBackgroundRequest, UpscaleRequest, CompressRequest]


@dataclass(frozen=True)
class OperationResult:
    """Successful outcome of exactly one operation request."""

    image: ImagePayload
