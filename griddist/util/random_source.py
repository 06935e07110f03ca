from typing import Optional

import numpy as np


class RandomSource:
    """Source of uniform draws in the open interval (0, 1)."""

    def __init__(self, seed: Optional[int] = None):
        self._generator = np.random.default_rng(seed)

    def seed(self, value: Optional[int]) -> None:
        self._generator = np.random.default_rng(value)

    def draw_uniform(self) -> float:
        r = self._generator.random()
        # Generator.random() is half-open [0, 1)
        while r == 0.0:
            r = self._generator.random()
        return float(r)


DEFAULT_SOURCE = RandomSource()
"""The random source shared by all distributions that are not given their own."""
