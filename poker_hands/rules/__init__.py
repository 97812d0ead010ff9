"""Poker hand rules.

This module provides:
- Card, rank and suit definitions (cards.py)
- Five-card validation and category detection (hands.py)
- Batched classification on torch tensors (batch.py, imported on demand)
"""

from .cards import (
    Rank,
    Suit,
    Card,
    HAND_SIZE,
    VALID_RANKS,
    VALID_SUITS,
    RANK_SYMBOLS,
    SUIT_SYMBOLS,
    coerce_card,
    is_valid_rank,
    is_valid_suit,
    create_standard_deck,
    sort_cards,
    make_cards_from_string,
)

from .hands import (
    Category,
    CATEGORY_LABELS,
    CATEGORY_PRECEDENCE,
    HandErrorReason,
    InvalidHandError,
    HandCounts,
    validate_hand,
    aggregate_hand,
    is_flush,
    is_royal,
    is_straight,
    classify_counts,
    classify_hand,
    evaluate_poker_hand,
    describe_categories,
)

__all__ = [
    # Cards
    "Rank",
    "Suit",
    "Card",
    "HAND_SIZE",
    "VALID_RANKS",
    "VALID_SUITS",
    "RANK_SYMBOLS",
    "SUIT_SYMBOLS",
    "coerce_card",
    "is_valid_rank",
    "is_valid_suit",
    "create_standard_deck",
    "sort_cards",
    "make_cards_from_string",
    # Hands
    "Category",
    "CATEGORY_LABELS",
    "CATEGORY_PRECEDENCE",
    "HandErrorReason",
    "InvalidHandError",
    "HandCounts",
    "validate_hand",
    "aggregate_hand",
    "is_flush",
    "is_royal",
    "is_straight",
    "classify_counts",
    "classify_hand",
    "evaluate_poker_hand",
    "describe_categories",
]
