import asyncio

import pytest

from imagelab.core.errors import EmptyResponse, RemoteError
from imagelab.core.types import ImagePayload
from imagelab.image.gateway import ImageGateway, build_payload, extract_first_image

from conftest import RESULT_PNG_B64, StubModel, image_response, text_response


def test_payload_carries_image_then_instruction(sample_image):
    payload = build_payload(sample_image, "Upscale this image by 2x")

    parts = payload["contents"][0]["parts"]
    assert parts[0] == {"inlineData": {"mimeType": "image/png", "data": sample_image.data}}
    assert parts[1] == {"text": "Upscale this image by 2x"}
    assert payload["generationConfig"]["responseModalities"] == ["TEXT", "IMAGE"]


def test_submit_returns_first_image_unmodified(sample_image):
    model = StubModel(response=image_response(data=RESULT_PNG_B64, mime_type="image/webp", text="Here you go"))
    gateway = ImageGateway(model)

    result = asyncio.run(gateway.submit(sample_image, "Remove the background from this image."))

    assert result.image == ImagePayload(mime_type="image/webp", data=RESULT_PNG_B64)
    assert len(model.calls) == 1


def test_text_only_response_is_empty(sample_image):
    gateway = ImageGateway(StubModel(response=text_response()))

    with pytest.raises(EmptyResponse):
        asyncio.run(gateway.submit(sample_image, "anything"))


@pytest.mark.parametrize("response", [{}, {"candidates": []}, {"candidates": [{"content": {}}]}, {"candidates": [None]}])
def test_missing_content_is_empty(sample_image, response):
    gateway = ImageGateway(StubModel(response=response))

    with pytest.raises(EmptyResponse):
        asyncio.run(gateway.submit(sample_image, "anything"))


def test_first_image_across_candidates_wins():
    response = {
        "candidates": [
            {"content": {"parts": [{"text": "thinking"}]}},
            {"content": {"parts": [
                {"inlineData": {"mimeType": "image/jpeg", "data": "Zmlyc3Q="}},
                {"inlineData": {"mimeType": "image/png", "data": "c2Vjb25k"}},
            ]}},
        ]
    }

    assert extract_first_image(response) == ImagePayload(mime_type="image/jpeg", data="Zmlyc3Q=")


def test_snake_case_inline_data_and_default_mime():
    response = {"candidates": [{"content": {"parts": [{"inline_data": {"data": "Zmlyc3Q="}}]}}]}

    assert extract_first_image(response) == ImagePayload(mime_type="image/png", data="Zmlyc3Q=")


def test_empty_inline_data_is_skipped():
    response = {"candidates": [{"content": {"parts": [
        {"inlineData": {"mimeType": "image/png", "data": ""}},
        {"inlineData": {"mimeType": "image/png", "data": "c2Vjb25k"}},
    ]}}]}

    assert extract_first_image(response).data == "c2Vjb25k"


def test_remote_errors_propagate_unchanged(sample_image):
    error = RemoteError("GEMINI HTTP ERROR (429)", provider="gemini", status_code=429)
    gateway = ImageGateway(StubModel(error=error))

    with pytest.raises(RemoteError) as excinfo:
        asyncio.run(gateway.submit(sample_image, "anything"))

    assert excinfo.value is error


def test_arbitrary_transport_errors_are_not_wrapped(sample_image):
    error = ConnectionResetError("peer went away")
    gateway = ImageGateway(StubModel(error=error))

    with pytest.raises(ConnectionResetError) as excinfo:
        asyncio.run(gateway.submit(sample_image, "anything"))

    assert excinfo.value is error


def test_every_submit_calls_the_model(sample_image):
    model = StubModel()
    gateway = ImageGateway(model)

    async def twice():
        await gateway.submit(sample_image, "same")
        await gateway.submit(sample_image, "same")

    asyncio.run(twice())

    assert len(model.calls) == 2


@pytest.mark.parametrize(
    "response",
    [
        {"candidates": [{"content": ["x"]}]},
        {"candidates": [{"content": {"parts": "x"}}]},
        {"candidates": [{"content": {"parts": {"inlineData": {"data": "eA=="}}}}]},
    ],
)
def test_malformed_content_shapes_are_empty(sample_image, response):
    gateway = ImageGateway(StubModel(response=response))

    with pytest.raises(EmptyResponse):
        asyncio.run(gateway.submit(sample_image, "anything"))
