"""
Deterministic linear congruential generator.

Encoder and decoder both rebuild the same reference pattern from the
seed, so the sequence must match the browser implementation exactly:
multiplier 9301, increment 49297, modulus 233280.
"""

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


class SeededRandom:
    """LCG yielding floats in [0, 1)."""

    def __init__(self, seed: int):
        self.state = seed

    def next(self) -> float:
        # seed < 2**32 so the product stays exact in a double; Python ints are exact anyway
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state / LCG_MODULUS
