# noise.py - sine-hash value noise with a fractal (octave) sum
#
# Not gradient/Perlin noise, despite the "perlin" generator name. The hash and
# octave formulas must stay as they are or existing seeds change appearance.
from __future__ import annotations
from dataclasses import dataclass
import math


def seeded_random(value: float) -> float:
    x = math.sin(value) * 10000.0
    return x - math.floor(x)


def fractal_noise(
    x: float,
    y: float,
    scale: float = 1.0,
    octaves: int = 1,
    persistence: float = 0.5,
    seed: float = 0,
) -> float:
    total = 0.0
    frequency = scale
    amplitude = 1.0
    max_value = 0.0

    for i in range(octaves):
        seed_offset = seed * 9999 + i * 1000
        sx = x * frequency
        sy = y * frequency

        n1 = seeded_random(sx * 12.9898 + sy * 78.233 + seed_offset)
        n2 = seeded_random(sx * 37.719 + sy * 17.2131 + seed_offset + 1000)

        total += ((n1 + n2) / 2.0) * amplitude
        max_value += amplitude

        amplitude *= persistence
        frequency *= 2

    if max_value == 0.0:
        return 0.0
    return total / max_value


@dataclass(frozen=True)
class NoiseField:
    seed: float

    def sample(self, x: float, y: float, scale: float = 1.0, octaves: int = 1, persistence: float = 0.5) -> float:
        return fractal_noise(x, y, scale, octaves, persistence, self.seed)

    def random(self, value: float) -> float:
        """Single hashed value in [0, 1) offset by this field's seed."""
        return seeded_random(value + self.seed)
