"""Seeded random sources for dealing sample hands.

Shuffling decks is the only randomness in the project, so seeding means
handing the dealer its own ``random.Random``. The global generator is left
alone, and two runs with the same seed deal the same hands.
"""

import random
from typing import Optional, Tuple


SEED_BOUND = 2**32


def resolve_seed(seed: Optional[int] = None) -> int:
    """Return seed, or a fresh one in [0, 2**32) when seed is None."""
    if seed is None:
        return random.SystemRandom().randrange(SEED_BOUND)
    return seed


def make_rng(seed: Optional[int] = None) -> Tuple[random.Random, int]:
    """Create a private generator for dealing.

    Args:
        seed: Seed to use. If None, one is generated so the run can be
              repeated later.

    Returns:
        (rng, seed) where seed is the value rng was seeded with.

    Example:
        >>> rng, seed = make_rng(42)
        >>> seed
        42
    """
    seed = resolve_seed(seed)
    return random.Random(seed), seed
