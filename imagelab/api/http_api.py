"""
HTTP API adapter for the image operations.

Architectural role:
- Expose the three operations as JSON endpoints.
- Parse and size-check the uploaded data URI before any remote call.
- Delegate work to `imagelab.core.engine`.
- Map the error taxonomy onto HTTP status codes.

Endpoint responsibilities:
- `GET /health`: liveness plus the configured model name.
- `POST /v1/images/remove-background`: `{photo_data_uri, intensity?}`.
- `POST /v1/images/upscale`: `{photo_data_uri, scale}`.
- `POST /v1/images/compress`: `{photo_data_uri, target_size_mb}`.

Error handling strategy:
- `PayloadTooLarge` -> HTTP 413.
- `ValidationError` -> HTTP 400.
- `EmptyResponse` / `RemoteError` -> HTTP 502.
- All error bodies are `{"error": <message>}`.
- Pydantic schema failures keep FastAPI's default 422 response.

Side effects:
- Loads environment variables at import time via `load_dotenv()`.
- Debug logging of request metadata is opt-in (`DEBUG == "true"`); image
  bodies are never logged.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from typing import Union

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, StrictFloat, StrictInt

from imagelab.api.multimodal.file_input_manager import PayloadTooLarge, check_payload_size
from imagelab.core import engine
from imagelab.core.errors import EmptyResponse, RemoteError, ValidationError
from imagelab.core.types import ImagePayload
from imagelab.image.provider_config import DEBUG, IMAGE_MODEL_NAME


logger = logging.getLogger(__name__)

app = FastAPI(title="ImageLab", version="0.1.0")


# ============================================================
# Request / Response Schemas
# ============================================================

class RemoveBackgroundBody(BaseModel):
    photo_data_uri: str
    intensity: str = "standard"


class UpscaleBody(BaseModel):
    photo_data_uri: str
    scale: str


class CompressBody(BaseModel):
    photo_data_uri: str
    target_size_mb: Union[StrictInt, StrictFloat]


class RemoveBackgroundResponse(BaseModel):
    processed_photo_data_uri: str


class UpscaleResponse(BaseModel):
    upscaled_photo_data_uri: str


class CompressResponse(BaseModel):
    compressed_photo_data_uri: str


# ============================================================
# Error Mapping
# ============================================================

@app.exception_handler(ValidationError)
async def handle_validation_error(request: Request, exc: ValidationError):
    status_code = 413 if isinstance(exc, PayloadTooLarge) else 400
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


@app.exception_handler(EmptyResponse)
async def handle_empty_response(request: Request, exc: EmptyResponse):
    return JSONResponse(status_code=502, content={"error": str(exc)})


@app.exception_handler(RemoteError)
async def handle_remote_error(request: Request, exc: RemoteError):
    logger.warning("Remote model call failed: %s", exc)
    return JSONResponse(status_code=502, content={"error": str(exc)})


def _parse_upload(data_uri: str) -> ImagePayload:
    image = ImagePayload.parse(data_uri)
    check_payload_size(image)
    if DEBUG:
        logger.info("Upload accepted: %s, ~%d bytes", image.mime_type, image.approx_size_bytes())
    return image


# ============================================================
# Endpoints
# ============================================================

@app.get("/health")
def health_check():
    return {"status": "ok", "model": IMAGE_MODEL_NAME}


@app.post("/v1/images/remove-background", response_model=RemoveBackgroundResponse)
async def remove_background(body: RemoveBackgroundBody) -> RemoveBackgroundResponse:
    image = _parse_upload(body.photo_data_uri)
    result = await engine.remove_background(image, intensity=body.intensity)
    return RemoveBackgroundResponse(processed_photo_data_uri=result.to_data_uri())


@app.post("/v1/images/upscale", response_model=UpscaleResponse)
async def upscale(body: UpscaleBody) -> UpscaleResponse:
    image = _parse_upload(body.photo_data_uri)
    result = await engine.upscale(image, scale=body.scale)
    return UpscaleResponse(upscaled_photo_data_uri=result.to_data_uri())


@app.post("/v1/images/compress", response_model=CompressResponse)
async def compress(body: CompressBody) -> CompressResponse:
    image = _parse_upload(body.photo_data_uri)
    result = await engine.compress(image, target_size_mb=body.target_size_mb)
    return CompressResponse(compressed_photo_data_uri=result.to_data_uri())


def main():
    import uvicorn

    port = int(os.getenv("IMAGELAB_PORT", "8000"))
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
