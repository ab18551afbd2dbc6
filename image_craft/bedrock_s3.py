"""
Bedrock + S3 image pipeline.

Flow:
  1. invoke a Stable Diffusion model on Bedrock with the prompt
  2. decode the base64 artifact and store it in S3 as <image_key>.png
  3. hand out a presigned GET URL for the object

boto3 is blocking: every call runs in the default executor.
"""

import asyncio
import base64
import json
import logging
from functools import partial
from typing import Any, Callable, Optional, TypeVar

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .base import ImageCraft, ImageCraftError
from .types import ImageGenerationParams

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MODEL_ID = "stability.stable-diffusion-xl-v1"


class BedrockS3ImageCraft(ImageCraft):
    """
    Text-to-image on Amazon Bedrock, stored in S3.

    Any model, decode or upload failure raises ImageCraftError; a URL is
    only handed out for an object that was written.
    """

    def __init__(
        self,
        bucket_name: str,
        params: Optional[ImageGenerationParams] = None,
        model_id: str = DEFAULT_MODEL_ID,
        url_expires_seconds: int = 900,
        bedrock_region: str = "us-east-1",
        s3_region: Optional[str] = None,
        bedrock_client: Any = None,
        s3_client: Any = None,
    ):
        """
        Args:
            bucket_name: S3 bucket holding generated images
            params: cfg_scale / seed / steps for the model
            model_id: Bedrock model id
            url_expires_seconds: Lifetime of presigned URLs
            bedrock_region: Region where the model is available
            s3_region: Region of the bucket
            bedrock_client: Pre-built bedrock-runtime client (tests inject fakes)
            s3_client: Pre-built s3 client (tests inject fakes)
        """
        self.bucket_name = bucket_name
        self.params = params or ImageGenerationParams()
        self.model_id = model_id
        self.url_expires_seconds = url_expires_seconds
        self.bedrock = bedrock_client or boto3.client("bedrock-runtime", region_name=bedrock_region)
        self.s3 = s3_client or boto3.client("s3", region_name=s3_region)

    @staticmethod
    def object_key(image_key: str) -> str:
        return f"{image_key}.png"

    async def _run(self, operation: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, operation)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"AWS error in image pipeline: {e}", exc_info=True)
            raise ImageCraftError(f"Image service unavailable: {e}") from e

    def _generate(self, prompt: str) -> bytes:
        body = json.dumps({
            "text_prompts": [{"text": prompt}],
            "cfg_scale": self.params.cfg_scale,
            "seed": self.params.seed,
            "steps": self.params.steps,
        })
        response = self.bedrock.invoke_model(
            modelId=self.model_id,
            body=body,
            accept="application/json",
            contentType="application/json",
        )
        try:
            data = json.loads(response["body"].read())
            return base64.b64decode(data["artifacts"][0]["base64"])
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ImageCraftError(f"Unexpected model response: {e}") from e

    def _store(self, image: bytes, image_key: str) -> None:
        self.s3.put_object(
            Bucket=self.bucket_name,
            Key=self.object_key(image_key),
            Body=image,
            ContentType="image/png",
        )

    async def create_image(self, prompt: str, image_key: str) -> None:
        image = await self._run(partial(self._generate, prompt))
        await self._run(partial(self._store, image, image_key))
        logger.info(
            "Image generated",
            extra={
                "image_key": image_key,
                "model_id": self.model_id,
                "size_bytes": len(image),
            },
        )

    async def get_image_url(self, image_key: str) -> str:
        return await self._run(
            partial(
                self.s3.generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": self.object_key(image_key)},
                ExpiresIn=self.url_expires_seconds,
            )
        )
