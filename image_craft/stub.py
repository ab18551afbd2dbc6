from .base import ImageCraft, ImageCraftError


class StubImageCraft(ImageCraft):
    """
    Deterministic fake image pipeline for testing and CI.

    create_image remembers the prompt; get_image_url returns a fixed URL
    for keys that were created and fails for anything else.
    """

    def __init__(self, base_url: str = "https://images.example.com"):
        self.base_url = base_url.rstrip("/")
        self.prompts: dict[str, str] = {}

    async def create_image(self, prompt: str, image_key: str) -> None:
        if prompt.strip() == "fail":
            raise ImageCraftError("Stub image generation failed")
        self.prompts[image_key] = prompt

    async def get_image_url(self, image_key: str) -> str:
        if image_key not in self.prompts:
            raise ImageCraftError(f"No image stored for {image_key}")
        return f"{self.base_url}/{image_key}.png"


class DisabledImageCraft(ImageCraft):
    """Image pipeline that is always unavailable."""

    async def create_image(self, prompt: str, image_key: str) -> None:
        raise ImageCraftError("Image generation is disabled")

    async def get_image_url(self, image_key: str) -> str:
        raise ImageCraftError("Image generation is disabled")
