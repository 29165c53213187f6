"""Error taxonomy for image operations.

Failure kinds:
    - `ValidationError`: input violates a declared domain constraint. Raised
      before any remote call is attempted.
    - `EmptyResponse`: the remote model answered but produced no image content.
    - `RemoteError`: the call to the hosted model itself failed (missing key,
      HTTP status, transport).

Propagation:
    None of these are retried or suppressed inside the package. Adapters
    (HTTP/CLI) translate them into transport-specific responses.
"""


class ImageLabError(Exception):
    """Base class for all package-level failures."""


class ValidationError(ImageLabError, ValueError):
    """Input is outside the declared domain of an operation."""


class EmptyResponse(ImageLabError):
    """Remote model returned no image-typed content item."""

    def __init__(self, message="No media returned from image generation."):
        super().__init__(message)


class RemoteError(ImageLabError, RuntimeError):
    """Call to the hosted model failed before a usable response was received.

    Attributes:
        provider: Provider label used in the sanitized message.
        status_code: HTTP status when the provider answered with one.
    """

    def __init__(self, message, provider=None, status_code=None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
