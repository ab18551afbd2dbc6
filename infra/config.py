"""
Infrastructure configuration system.

Environment-based backend selection with sensible defaults.
Memo storage defaults to local SQLite; images default to Bedrock + S3.
"""

import logging
import os
from dataclasses import dataclass
from typing import Callable, Literal, TypeVar

from image_craft import BedrockS3ImageCraft, ImageCraft, ImageGenerationParams, StubImageCraft
from memo_store import DynamoDBMemoStore, MemoStore, SQLiteMemoStore, StubMemoStore
from transport.line.base import LineBot
from transport.line.client import DEFAULT_API_BASE_URL, LineMessagingClient
from transport.line.stub import StubLineBot

logger = logging.getLogger(__name__)

MemoStoreBackendType = Literal["stub", "sqlite", "dynamodb"]
ImageCraftBackendType = Literal["stub", "bedrock"]
LineBotBackendType = Literal["stub", "line"]

N = TypeVar("N", int, float)

MAX_REPLY_MESSAGES = 5   # LINE accepts at most 5 messages per reply


class ConfigurationError(Exception):
    """Settings that no backend can run with."""
    pass


def _env_number(name: str, default: N, cast: Callable[[str], N]) -> N:
    """Numeric env var; missing, invalid or zero values fall back to default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a number, using {default}")
        return default
    return value or default


@dataclass
class InfraConfig:
    """Infrastructure configuration from environment."""

    # LINE
    line_backend: LineBotBackendType
    line_channel_secret: str
    line_channel_access_token: str
    line_api_base_url: str

    # Memo store
    memo_store_backend: MemoStoreBackendType
    sqlite_db_path: str
    table_name: str
    aws_region: str

    # Image pipeline
    image_craft_backend: ImageCraftBackendType
    bucket_name: str
    bedrock_region: str
    bedrock_model_id: str
    bedrock_cfg_scale: float
    bedrock_seed: int
    bedrock_steps: int
    image_url_expires_seconds: int

    # Commands
    max_list_number: int
    loading_seconds: int

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """
        Load configuration from environment variables.

        Numeric values follow "invalid or zero means default".
        """
        max_list_number = _env_number("TABLE_MAXIMUM_NUMBER_OF_RECORD", 5, int)
        if not 1 <= max_list_number <= MAX_REPLY_MESSAGES:
            logger.warning(
                f"TABLE_MAXIMUM_NUMBER_OF_RECORD={max_list_number} outside 1..{MAX_REPLY_MESSAGES}, using 5"
            )
            max_list_number = 5

        loading_seconds = _env_number("LOADING_SECONDS", 30, int)
        if loading_seconds % 5 != 0 or not 5 <= loading_seconds <= 60:
            logger.warning(f"LOADING_SECONDS={loading_seconds} must be a multiple of 5 in 5..60, using 30")
            loading_seconds = 30

        return cls(
            # LINE Configuration
            line_backend=os.getenv("LINE_BOT_BACKEND", "line"),  # type: ignore
            line_channel_secret=os.getenv("LINE_CHANNEL_SECRET", ""),
            line_channel_access_token=os.getenv("LINE_CHANNEL_ACCESS_TOKEN", ""),
            line_api_base_url=os.getenv("LINE_API_BASE_URL", DEFAULT_API_BASE_URL),

            # Memo Store Configuration
            memo_store_backend=os.getenv("MEMO_STORE_BACKEND", "sqlite"),  # type: ignore
            sqlite_db_path=os.getenv("SQLITE_DB_PATH", "./memo_store.db"),
            table_name=os.getenv("TABLE_NAME", "memoStore"),
            aws_region=os.getenv("AWS_REGION", "ap-northeast-1"),

            # Image Pipeline Configuration
            image_craft_backend=os.getenv("IMAGE_CRAFT_BACKEND", "bedrock"),  # type: ignore
            bucket_name=os.getenv("BUCKET_NAME", ""),
            bedrock_region=os.getenv("BEDROCK_REGION", "us-east-1"),
            bedrock_model_id=os.getenv("BEDROCK_MODEL_ID", "stability.stable-diffusion-xl-v1"),
            bedrock_cfg_scale=_env_number("BEDROCK_PARAM_CFG_SCALE", 10.0, float),
            bedrock_seed=_env_number("BEDROCK_PARAM_SEED", 0, int),
            bedrock_steps=_env_number("BEDROCK_PARAM_STEPS", 50, int),
            image_url_expires_seconds=_env_number("IMAGE_URL_EXPIRES_SECONDS", 900, int),

            # Command Configuration
            max_list_number=max_list_number,
            loading_seconds=loading_seconds,
        )

    def create_line_bot(self) -> LineBot:
        """Create LINE client based on configuration."""
        if self.line_backend == "stub":
            return StubLineBot(channel_secret=self.line_channel_secret or "stub_channel_secret")
        if self.line_backend != "line":
            logger.warning(f"Unknown LINE_BOT_BACKEND {self.line_backend!r}, using line")
        return LineMessagingClient(
            channel_secret=self.line_channel_secret,
            access_token=self.line_channel_access_token,
            api_base_url=self.line_api_base_url,
        )

    def create_memo_store(self) -> MemoStore:
        """Create memo store instance based on configuration."""
        if self.memo_store_backend == "dynamodb":
            if not self.table_name:
                raise ConfigurationError("MEMO_STORE_BACKEND=dynamodb requires TABLE_NAME")
            return DynamoDBMemoStore(table_name=self.table_name, region_name=self.aws_region)
        elif self.memo_store_backend == "stub":
            return StubMemoStore()
        else:
            if self.memo_store_backend != "sqlite":
                logger.warning(f"Unknown MEMO_STORE_BACKEND {self.memo_store_backend!r}, using sqlite")
            return SQLiteMemoStore(db_path=self.sqlite_db_path)

    def create_image_craft(self) -> ImageCraft:
        """Create image pipeline instance based on configuration."""
        if self.image_craft_backend == "stub":
            return StubImageCraft()
        if self.image_craft_backend != "bedrock":
            logger.warning(f"Unknown IMAGE_CRAFT_BACKEND {self.image_craft_backend!r}, using bedrock")
        if not self.bucket_name:
            raise ConfigurationError("IMAGE_CRAFT_BACKEND=bedrock requires BUCKET_NAME")
        return BedrockS3ImageCraft(
            bucket_name=self.bucket_name,
            params=ImageGenerationParams(
                cfg_scale=self.bedrock_cfg_scale,
                seed=self.bedrock_seed,
                steps=self.bedrock_steps,
            ),
            model_id=self.bedrock_model_id,
            url_expires_seconds=self.image_url_expires_seconds,
            bedrock_region=self.bedrock_region,
            s3_region=self.aws_region,
        )


def get_config() -> InfraConfig:
    """Get infrastructure configuration from the current environment."""
    return InfraConfig.from_env()
