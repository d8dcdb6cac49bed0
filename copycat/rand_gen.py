# Folder: copycat/
# File: rand_gen.py
import time
import hashlib
import logging
from typing import Any, Optional, Sequence, Union

import numpy as np

logger = logging.getLogger(__name__)

SEED_MASK = 0xFFFFFFFFFFFFFFFF   # Integer seeds wrap to 64 bits


def seed_to_int(seed: Union[int, str, None]) -> int:
    """
    Maps a seed of any supported type onto a non-negative integer.
    Strings are hashed with SHA-256; None uses the current time in milliseconds.
    """
    if seed is None:
        seed = int(time.time() * 1000)
    if isinstance(seed, (int, np.integer)) and not isinstance(seed, bool):
        return int(seed) & SEED_MASK
    digest = hashlib.sha256(str(seed).encode('utf-8')).digest()
    return int.from_bytes(digest[:16], 'little')


class RandGen:
    """
    Seeded source of randomness for the whole engine.
    Every stochastic decision draws from this generator, so two engines built
    with the same seed and fed the same strings make the same decisions.
    """

    def __init__(self, seed: Union[int, str, None] = None):
        """
        Args:
            seed (int | str | None): Seed for the underlying PCG64 generator.
        """
        self.seed = seed_to_int(seed)
        self.rng = np.random.default_rng(self.seed)
        logger.debug(f"RandGen seeded with {seed!r} -> {self.seed}")

    def rand(self) -> float:
        """Returns a float drawn uniformly from [0, 1)."""
        return float(self.rng.random())

    def coin_flip(self, p: float = 0.5) -> bool:
        """Returns True with probability p."""
        return self.rand() < p

    def choice(self, seq: Sequence[Any]) -> Any:
        """Returns a uniformly chosen element of seq (None when seq is empty)."""
        if not seq:
            return None
        idx = int(np.floor(self.rand() * len(seq)))
        return seq[idx]

    def weighted_choice(self, seq: Sequence[Any], weights: Sequence[float]) -> Any:
        """
        Returns an element of seq chosen with probability proportional to its weight.
        Args:
            seq (Sequence): Candidates.
            weights (Sequence[float]): One non-negative weight per candidate.
        Returns:
            The chosen element, or None if seq is empty. When every weight is
            zero the last element is returned.
        Raises:
            ValueError: If seq and weights differ in length.
        """
        if not seq:
            return None
        n = len(seq)
        if n != len(weights):
            raise ValueError(f"Incompatible lengths in weighted_choice: {n} items, {len(weights)} weights")
        cum_weights = np.cumsum(np.asarray(weights, dtype=float))
        r = self.rand() * cum_weights[-1]
        hits = np.nonzero(r < cum_weights)[0]
        idx = int(hits[0]) if hits.size else n - 1
        return seq[idx]

    def weighted_greater_than(self, a: float, b: float) -> bool:
        """Returns True with probability a/(a+b); False when both are zero."""
        total = a + b
        return False if total == 0 else self.coin_flip(a / total)

    def sqrt_blur(self, val: float) -> float:
        """Returns val plus or minus sqrt(val), the sign chosen at random."""
        sign = 1 if self.coin_flip() else -1
        return val + sign * float(np.sqrt(val))
