import asyncio
import base64
import io

import pytest
from PIL import Image

from imagelab.core import engine
from imagelab.core.types import ImagePayload
from imagelab.image.gateway import ImageGateway


RESULT_PNG_B64 = base64.b64encode(b"\x89PNG\r\n\x1a\nprocessed-bytes").decode("ascii")


def make_png_bytes(size=(4, 4), color=(200, 30, 30)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def image_response(data=RESULT_PNG_B64, mime_type="image/png", text=None):
    parts = []
    if text is not None:
        parts.append({"text": text})
    parts.append({"inlineData": {"mimeType": mime_type, "data": data}})
    return {"candidates": [{"content": {"role": "model", "parts": parts}}]}


def text_response(text="I cannot edit this image."):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


class StubModel:
    """Records every payload and answers with a fixed or computed response."""

    def __init__(self, response=None, responder=None, error=None, delay=0.0):
        self.response = response if response is not None else image_response()
        self.responder = responder
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate_content(self, payload):
        self.calls.append(payload)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.responder is not None:
            return await self.responder(payload)
        return self.response


def instruction_of(payload):
    return payload["contents"][0]["parts"][1]["text"]


@pytest.fixture
def png_bytes():
    return make_png_bytes()


@pytest.fixture
def sample_image(png_bytes):
    return ImagePayload.from_bytes(png_bytes, "image/png")


@pytest.fixture
def stub_model():
    return StubModel()


@pytest.fixture
def installed_model():
    """Install a stub-backed gateway as the engine default for adapter tests."""
    model = StubModel()
    engine.set_gateway(ImageGateway(model))
    yield model
    engine.set_gateway(None)
