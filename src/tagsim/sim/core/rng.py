from __future__ import annotations

import math
import random
from typing import Optional

_AGENT_STREAM_SALT = 0x7A6C0FFEE5EED123
_AGENT_STREAM_STRIDE = 0x9E3779B97F4A7C15


def derive_stream_seed(seed: int, salt: int) -> int:
    return (int(seed) ^ int(salt)) & 0xFFFFFFFFFFFFFFFF


class DeterministicRng:
    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = random.SystemRandom().getrandbits(64)
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def next_range(self, low: float, high: float) -> float:
        """Uniform float in ``[low, high)``."""
        if high <= low:
            return low
        return low + (high - low) * self._random.random()

    def next_int(self, max_value: int) -> int:
        return self._random.randrange(max_value)

    def next_int_inclusive(self, low: int, high: int) -> int:
        return self._random.randint(low, high)

    def next_bool(self, probability: float = 0.5) -> bool:
        return self._random.random() < probability

    def next_angle(self) -> float:
        return self.next_range(0.0, 2.0 * math.pi)

    def spawn_agent_stream(self, index: int) -> "DeterministicRng":
        # spread the index over 64 bits so streams of neighbouring seeds do not line up
        base = derive_stream_seed(self._seed, _AGENT_STREAM_SALT)
        return DeterministicRng(derive_stream_seed(base, (index + 1) * _AGENT_STREAM_STRIDE))
