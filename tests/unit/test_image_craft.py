"""
Image Pipeline Tests

Stub behaviour and the Bedrock + S3 pipeline against mocked boto3 clients.
"""

import base64
import io
import json
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from image_craft import (
    BedrockS3ImageCraft,
    DisabledImageCraft,
    ImageCraftError,
    ImageGenerationParams,
    StubImageCraft,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def _model_response(payload: dict) -> dict:
    return {"body": io.BytesIO(json.dumps(payload).encode("utf-8"))}


@pytest.fixture
def bedrock():
    client = MagicMock()
    client.invoke_model.return_value = _model_response(
        {"artifacts": [{"base64": base64.b64encode(PNG_BYTES).decode("ascii")}]}
    )
    return client


@pytest.fixture
def s3():
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://bucket.s3.amazonaws.com/Q1.png?X-Amz-Signature=abc"
    return client


@pytest.fixture
def craft(bedrock, s3):
    return BedrockS3ImageCraft(
        bucket_name="images",
        params=ImageGenerationParams(cfg_scale=7, seed=42, steps=30),
        url_expires_seconds=600,
        bedrock_client=bedrock,
        s3_client=s3,
    )


class TestBedrockS3ImageCraft:
    """Test the Bedrock + S3 pipeline."""

    @pytest.mark.asyncio
    async def test_create_image_invokes_model_and_uploads(self, craft, bedrock, s3):
        await craft.create_image("a red bicycle", "Q1")

        kwargs = bedrock.invoke_model.call_args.kwargs
        assert kwargs["modelId"] == "stability.stable-diffusion-xl-v1"
        assert json.loads(kwargs["body"]) == {
            "text_prompts": [{"text": "a red bicycle"}],
            "cfg_scale": 7,
            "seed": 42,
            "steps": 30,
        }
        s3.put_object.assert_called_once_with(
            Bucket="images",
            Key="Q1.png",
            Body=PNG_BYTES,
            ContentType="image/png",
        )

    @pytest.mark.asyncio
    async def test_get_image_url_is_presigned(self, craft, s3):
        url = await craft.get_image_url("Q1")

        assert url.startswith("https://bucket.s3.amazonaws.com/Q1.png")
        s3.generate_presigned_url.assert_called_once_with(
            "get_object",
            Params={"Bucket": "images", "Key": "Q1.png"},
            ExpiresIn=600,
        )

    @pytest.mark.asyncio
    async def test_model_error_raises_and_skips_upload(self, craft, bedrock, s3):
        bedrock.invoke_model.side_effect = ClientError(
            {"Error": {"Code": "ValidationException", "Message": "bad prompt"}}, "InvokeModel"
        )

        with pytest.raises(ImageCraftError):
            await craft.create_image("a red bicycle", "Q1")

        s3.put_object.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_artifacts_raise(self, craft, bedrock, s3):
        bedrock.invoke_model.return_value = _model_response({"artifacts": []})

        with pytest.raises(ImageCraftError):
            await craft.create_image("a red bicycle", "Q1")

        s3.put_object.assert_not_called()

    @pytest.mark.asyncio
    async def test_upload_error_raises(self, craft, s3):
        s3.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )

        with pytest.raises(ImageCraftError):
            await craft.create_image("a red bicycle", "Q1")


class TestStubImageCraft:
    """Test the stub pipeline."""

    @pytest.mark.asyncio
    async def test_url_for_created_image(self):
        craft = StubImageCraft(base_url="https://cdn.test/")

        await craft.create_image("cat", "K1")

        assert await craft.get_image_url("K1") == "https://cdn.test/K1.png"

    @pytest.mark.asyncio
    async def test_url_for_unknown_key_raises(self):
        with pytest.raises(ImageCraftError):
            await StubImageCraft().get_image_url("missing")

    @pytest.mark.asyncio
    async def test_fail_prompt_raises(self):
        with pytest.raises(ImageCraftError):
            await StubImageCraft().create_image(" fail ", "K1")

    @pytest.mark.asyncio
    async def test_disabled_always_raises(self):
        with pytest.raises(ImageCraftError):
            await DisabledImageCraft().create_image("cat", "K1")
