"""
Image pipeline boundary.

This package provides a clean abstraction for image generation and storage,
allowing the use case to remain agnostic of the underlying service.

Supported backends:
- StubImageCraft: Deterministic fake pipeline (default for CI/tests)
- BedrockS3ImageCraft: Amazon Bedrock text-to-image stored in S3

Example usage:
    from image_craft import StubImageCraft

    craft = StubImageCraft()
    await craft.create_image("a red bicycle", "quote-token")
    url = await craft.get_image_url("quote-token")
"""

from .base import ImageCraft, ImageCraftError
from .bedrock_s3 import BedrockS3ImageCraft
from .stub import DisabledImageCraft, StubImageCraft
from .types import ImageGenerationParams

__all__ = [
    "ImageCraft",
    "ImageCraftError",
    "ImageGenerationParams",
    "StubImageCraft",
    "DisabledImageCraft",
    "BedrockS3ImageCraft",
]
