"""
Configuration management for the LINE memo bot.

Loads environment variables from .env file and provides typed access to
application-level configuration. Backend selection lives in infra.config.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)

logger = logging.getLogger(__name__)


class Config:
    """Configuration class for the LINE memo bot."""

    # LINE Channel Configuration
    LINE_CHANNEL_SECRET = os.getenv("LINE_CHANNEL_SECRET", "")
    LINE_CHANNEL_ACCESS_TOKEN = os.getenv("LINE_CHANNEL_ACCESS_TOKEN", "")

    # Server Configuration
    APP_PORT = int(os.getenv("APP_PORT", "8000"))

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def missing(cls) -> list[str]:
        """Names of required settings that are not set."""
        required = ["LINE_CHANNEL_SECRET", "LINE_CHANNEL_ACCESS_TOKEN"]
        return [key for key in required if not getattr(cls, key)]

    @classmethod
    def validate(cls) -> bool:
        """Validate that required configuration is set."""
        missing = cls.missing()
        if missing:
            logger.warning(f"Missing required environment variables: {', '.join(missing)}")
            return False
        return True


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  LINE Channel Secret: {'✓ Set' if Config.LINE_CHANNEL_SECRET else '✗ Missing'}")
    print(f"  LINE Access Token: {'✓ Set' if Config.LINE_CHANNEL_ACCESS_TOKEN else '✗ Missing'}")
    print(f"  App Port: {Config.APP_PORT}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"  Log Level: {Config.LOG_LEVEL}")

    from infra import get_config

    infra_config = get_config()
    print(f"  Memo Store: {infra_config.memo_store_backend}")
    print(f"  Image Craft: {infra_config.image_craft_backend}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")
