"""
Infrastructure initialization and bootstrap.

Explicit composition: collaborators are constructed from configuration and
passed into the use case. Build once per process (main.lifespan) and hand
the result around; nothing looks services up at runtime.
"""

from typing import Optional

from usecase import EventDispatcher, LineBotUseCase

from .config import InfraConfig, get_config


class InfraBootstrap:
    """Composition root for the LINE bot."""

    def __init__(self, config: Optional[InfraConfig] = None):
        """Build every backend and the use case from configuration."""
        self.config = config or get_config()
        self.line_bot = self.config.create_line_bot()
        self.memo_store = self.config.create_memo_store()
        self.image_craft = self.config.create_image_craft()
        self.dispatcher = EventDispatcher(
            line_bot=self.line_bot,
            memo_store=self.memo_store,
            image_craft=self.image_craft,
            max_list_number=self.config.max_list_number,
            loading_seconds=self.config.loading_seconds,
        )
        self.use_case = LineBotUseCase(line_bot=self.line_bot, dispatcher=self.dispatcher)

    def __repr__(self) -> str:
        """String representation showing configured backends."""
        return (
            f"InfraBootstrap(line={self.config.line_backend}, "
            f"memo_store={self.config.memo_store_backend}, "
            f"image_craft={self.config.image_craft_backend}, "
            f"max_list_number={self.config.max_list_number})"
        )


def bootstrap_infrastructure(config: Optional[InfraConfig] = None) -> InfraBootstrap:
    """
    Bootstrap all infrastructure backends.

    Args:
        config: Optional custom configuration

    Returns:
        A new InfraBootstrap with all backends and the use case built
    """
    return InfraBootstrap(config)
