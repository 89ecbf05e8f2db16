"""Random source for weighted next-token sampling."""

import logging
import time
from typing import Optional

import torch


logger = logging.getLogger(__name__)


class TorchSampler:
    """Uniform integer draws from a seeded torch.Generator."""

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = int(time.time())
        self.seed = seed
        self.generator = torch.Generator()
        self.generator.manual_seed(seed)
        logger.info(f"Sampler seeded with {seed}")

    def __call__(self, upper: int) -> int:
        """Draw r uniformly from [0, upper)."""
        if upper <= 0:
            raise ValueError(f"upper must be positive, got {upper}")
        return int(torch.randint(0, upper, (1,), generator=self.generator).item())
