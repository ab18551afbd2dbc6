from abc import ABC, abstractmethod


class ImageCraftError(Exception):
    """Image generation or retrieval failed."""
    pass


class ImageCraft(ABC):
    """
    Abstract image pipeline boundary.
    The use case must depend ONLY on this interface.

    An image is submitted and fetched under the same key (the quote token
    of the message that asked for it).
    """

    @abstractmethod
    async def create_image(self, prompt: str, image_key: str) -> None:
        """Generate an image for prompt and store it under image_key."""
        raise NotImplementedError

    @abstractmethod
    async def get_image_url(self, image_key: str) -> str:
        """Return a retrievable (possibly time-limited) URL for a stored image."""
        raise NotImplementedError
