"""Provider/runtime configuration for the image layer.

Architectural role:
    Centralizes model selection, endpoint, transport timeout, upload limits and
    credential lookup for `imagelab.image.client` and the adapters.

Determinism:
    Deterministic for a fixed process environment and key files. Values are
    resolved at import time (plus runtime key-file reads in `load_key`).

Failure behavior:
    Missing key material is represented as `None` and turned into a
    `RemoteError` by the client when a call is attempted.
"""

import os
from dotenv import load_dotenv

load_dotenv()

PROVIDER = "gemini"

# Model selector; becomes part of the generateContent URL.
IMAGE_MODEL_NAME = os.getenv(
    "IMAGE_MODEL_NAME", "gemini-2.0-flash-preview-image-generation"
)

GEMINI_URL_TEMPLATE = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "{model}:generateContent"
)

GEMINI_KEY_FILE = "config/gemini.key"

# Response kinds the model is asked to return. Only images are consumed.
RESPONSE_MODALITIES = ["TEXT", "IMAGE"]

# Single-attempt transport timeout. No retry is layered on top.
IMAGE_TIMEOUT_SECONDS = float(os.getenv("IMAGE_TIMEOUT_SECONDS", "120"))

# Upload constraints applied by file/HTTP adapters.
MAX_UPLOAD_MB = float(os.getenv("MAX_UPLOAD_MB", "4"))
MAX_UPLOAD_BYTES = int(MAX_UPLOAD_MB * 1024 * 1024)
ALLOWED_MIME_TYPES = {"image/png", "image/jpeg", "image/webp"}

DEBUG = os.getenv("DEBUG") == "true"


def load_key(path):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/gemini.key` -> `GEMINI_API_KEY`).
        2. Raw file contents at `path`.

    Edge cases:
        - `None` path returns `None`.
        - Missing or empty file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip() or None


def model_url(model=None):
    return GEMINI_URL_TEMPLATE.format(model=model or IMAGE_MODEL_NAME)
