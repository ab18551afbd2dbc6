"""
Infrastructure module exports.

Configuration and bootstrap for all service backends.
"""

from .bootstrap import InfraBootstrap, bootstrap_infrastructure
from .config import (
    ConfigurationError,
    ImageCraftBackendType,
    InfraConfig,
    LineBotBackendType,
    MemoStoreBackendType,
    get_config,
)

__all__ = [
    "InfraConfig",
    "ConfigurationError",
    "get_config",
    "LineBotBackendType",
    "MemoStoreBackendType",
    "ImageCraftBackendType",
    "InfraBootstrap",
    "bootstrap_infrastructure",
]
