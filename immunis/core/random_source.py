"""Injectable random number source.

Every random decision in combat (target coin flips, mutation, biofilm and
spore triggers) goes through a single RandomSource so that a seeded battle
replays identically.
"""
from typing import Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class RandomSource:
    """Thin wrapper around a numpy Generator with the draws combat needs."""
    
    def __init__(self, seed: Optional[int] = None, generator: Optional[np.random.Generator] = None):
        """Create a random source.
        
        Args:
            seed: Seed for a fresh generator (None for OS entropy)
            generator: Existing generator to share, takes precedence over seed
        """
        self.seed = seed
        self.generator = generator if generator is not None else np.random.default_rng(seed)
    
    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return float(self.generator.random())
    
    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        if probability <= 0.0:
            return False
        if probability >= 1.0:
            return True
        return self.random() < probability
    
    def randint(self, upper: int) -> int:
        """Uniform integer in [0, upper)."""
        if upper <= 0:
            raise ValueError("upper bound must be positive")
        return int(self.generator.integers(0, upper))
    
    def choice(self, items: Sequence[T]) -> T:
        """Pick one element uniformly."""
        if not items:
            raise ValueError("cannot choose from an empty sequence")
        return items[self.randint(len(items))]
