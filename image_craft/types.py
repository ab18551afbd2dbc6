from dataclasses import dataclass


@dataclass(frozen=True)
class ImageGenerationParams:
    cfg_scale: float = 10     # How strictly the image follows the prompt
    seed: int = 0             # 0 = random
    steps: int = 50           # Diffusion steps
