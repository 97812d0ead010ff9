"""Poker Hands - five-card poker hand classification.

Classifies a five-card hand into one of ten categories, from high card up
to royal flush, with a scalar API, a batched torch classifier, a CLI and a
small HTTP service.
"""

__version__ = "0.1.0"
__author__ = "Poker Hands Team"

from poker_hands.rules.hands import InvalidHandError, evaluate_poker_hand
from poker_hands.utils.seeding import make_rng

__all__ = ["__version__", "evaluate_poker_hand", "InvalidHandError", "make_rng"]
