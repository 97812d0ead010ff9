"""Five-card hand validation and category detection.

Categories, from highest to lowest precedence:
- Royal flush: 10, J, Q, K and A of one suit
- Straight flush: five cards of one suit in sequence
- Four of a kind: four cards of one rank plus any card
- Full house: three of one rank and two of another
- Flush: five cards of one suit
- Straight: five cards in sequence, mixed suits
- Three of a kind: three cards of one rank plus two unequal cards
- Two pair: two pairs of different ranks
- Pair: two cards of one rank plus three unequal cards
- High card: none of the above

Sequence rules:
- Ace counts as rank 1 everywhere except the Broadway run (10-J-Q-K-A),
  which is special-cased as a straight
- The wheel (A-2-3-4-5) needs no special case: with Ace as 1 it is an
  ordinary run of five
- Runs do not wrap around (J-Q-K-A-2 is not a straight)
- Any repeated rank rules out a straight
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Any, Optional, Tuple

import numpy as np

from .cards import (
    Card,
    HAND_SIZE,
    NUM_RANKS,
    NUM_SUITS,
    Rank,
    coerce_card,
    is_valid_rank,
    is_valid_suit,
)


# A run of five distinct ranks spans exactly four steps
MAX_RANK_SPAN = 4
ROYAL_TAIL_LENGTH = 4
BROADWAY_START = int(Rank.TEN)

FOUR_OF_A_KIND_COUNT = 4
THREE_OF_A_KIND_COUNT = 3
PAIR_COUNT = 2
TWO_PAIR_COUNT = 2


class Category(IntEnum):
    """Hand categories. Higher value = higher precedence."""

    HIGH_CARD = auto()
    PAIR = auto()
    TWO_PAIR = auto()
    THREE_OF_A_KIND = auto()
    STRAIGHT = auto()
    FLUSH = auto()
    FULL_HOUSE = auto()
    FOUR_OF_A_KIND = auto()
    STRAIGHT_FLUSH = auto()
    ROYAL_FLUSH = auto()

    @property
    def label(self) -> str:
        """Result string, e.g. "fourofakind"."""
        return self.name.replace("_", "").lower()

    @classmethod
    def from_label(cls, label: str) -> "Category":
        for category in cls:
            if category.label == label:
                return category
        raise ValueError(f"Unknown category label: {label!r}")


CATEGORY_LABELS = tuple(c.label for c in Category)


class HandErrorReason(Enum):
    """Why a hand was rejected."""

    WRONG_CARDINALITY = "wrong_cardinality"
    INVALID_RANK = "invalid_rank"
    INVALID_SUIT = "invalid_suit"


class InvalidHandError(ValueError):
    """Raised when a hand is not five cards with valid ranks and suits.

    Attributes:
        reason: Which check failed
        index: Position of the offending card, or None for cardinality errors
        hand: Position of the offending hand within a batch, or None for a
            single hand
    """

    def __init__(
        self,
        reason: HandErrorReason,
        message: str,
        index: Optional[int] = None,
        hand: Optional[int] = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.index = index
        self.hand = hand


@dataclass(frozen=True)
class HandCounts:
    """Rank and suit multiplicities of a validated hand.

    Attributes:
        rank_counts: Count per rank, indexed by rank value (index 0 unused)
        suit_counts: Count per suit, indexed by suit ordinal
        distinct_ranks: Ranks present, ascending, no repeats
    """

    rank_counts: np.ndarray
    suit_counts: np.ndarray
    distinct_ranks: Tuple[int, ...]

    @property
    def rank_frequencies(self) -> Tuple[int, ...]:
        """Non-zero rank counts, in rank order."""
        return tuple(int(c) for c in self.rank_counts if c)


def validate_hand(hand: Any) -> Tuple[Card, ...]:
    """Check that hand is exactly five cards with valid ranks and suits.

    Cards are checked in order, rank before suit. Duplicate cards are not
    rejected.

    Args:
        hand: Sequence of Card, (rank, suit) pairs, or {"rank", "suit"} mappings

    Returns:
        The hand as a tuple of Card

    Raises:
        InvalidHandError: On the first failed check
    """
    if (
        not isinstance(hand, Sequence)
        or isinstance(hand, (str, bytes))
        or len(hand) != HAND_SIZE
    ):
        raise InvalidHandError(
            HandErrorReason.WRONG_CARDINALITY,
            f"A valid poker hand must have exactly {HAND_SIZE} cards.",
        )

    cards = tuple(coerce_card(c) for c in hand)
    for i, card in enumerate(cards):
        if not is_valid_rank(card.rank):
            raise InvalidHandError(
                HandErrorReason.INVALID_RANK,
                f"Invalid rank detected: {card.rank!r} (card {i}).",
                index=i,
            )
        if not is_valid_suit(card.suit):
            raise InvalidHandError(
                HandErrorReason.INVALID_SUIT,
                f"Invalid suit detected: {card.suit!r} (card {i}).",
                index=i,
            )
    return cards


def aggregate_hand(cards: Sequence[Card]) -> HandCounts:
    """Count ranks and suits of a validated hand."""
    ranks = np.fromiter((int(c.rank) for c in cards), dtype=np.int64, count=len(cards))
    suits = np.fromiter((int(c.suit) for c in cards), dtype=np.int64, count=len(cards))

    rank_counts = np.bincount(ranks, minlength=NUM_RANKS + 1)
    suit_counts = np.bincount(suits, minlength=NUM_SUITS)
    distinct_ranks = tuple(int(r) for r in np.flatnonzero(rank_counts))

    return HandCounts(
        rank_counts=rank_counts,
        suit_counts=suit_counts,
        distinct_ranks=distinct_ranks,
    )


def is_flush(counts: HandCounts) -> bool:
    """All five cards share one suit."""
    return int(counts.suit_counts.max()) == HAND_SIZE


def is_royal(distinct_ranks: Sequence[int]) -> bool:
    """Check for the Broadway ranks: an Ace plus 10, J, Q, K as the top four.

    Args:
        distinct_ranks: Ranks present, ascending, no repeats
    """
    if int(Rank.ACE) not in distinct_ranks:
        return False
    tail = list(distinct_ranks)[-ROYAL_TAIL_LENGTH:]
    return len(tail) == ROYAL_TAIL_LENGTH and all(
        r == BROADWAY_START + i for i, r in enumerate(tail)
    )


def is_straight(distinct_ranks: Sequence[int]) -> bool:
    """Check for five distinct ranks in sequence, or Broadway.

    Args:
        distinct_ranks: Ranks present, ascending, no repeats
    """
    if len(distinct_ranks) == HAND_SIZE and distinct_ranks[-1] - distinct_ranks[0] == MAX_RANK_SPAN:
        return True
    return is_royal(distinct_ranks)


def classify_counts(counts: HandCounts) -> Category:
    """Return the highest-precedence category the counts satisfy.

    Checks run in the order of CATEGORY_PRECEDENCE and the first match wins,
    so a straight flush is never reported as a flush and a full house never
    as three of a kind or a pair.
    """
    flush = is_flush(counts)
    ranks = counts.distinct_ranks
    rank_counts = counts.rank_counts
    has_four = bool((rank_counts == FOUR_OF_A_KIND_COUNT).any())
    has_three = bool((rank_counts == THREE_OF_A_KIND_COUNT).any())
    num_pairs = int((rank_counts == PAIR_COUNT).sum())

    if flush and is_royal(ranks):
        return Category.ROYAL_FLUSH
    if flush and is_straight(ranks):
        return Category.STRAIGHT_FLUSH
    if has_four:
        return Category.FOUR_OF_A_KIND
    if has_three and num_pairs > 0:
        return Category.FULL_HOUSE
    if flush:
        return Category.FLUSH
    if is_straight(ranks):
        return Category.STRAIGHT
    if has_three:
        return Category.THREE_OF_A_KIND
    if num_pairs == TWO_PAIR_COUNT:
        return Category.TWO_PAIR
    if num_pairs > 0:
        return Category.PAIR
    return Category.HIGH_CARD


# Highest first; the order classify_counts checks in
CATEGORY_PRECEDENCE = tuple(sorted(Category, reverse=True))


def classify_hand(hand: Any) -> Category:
    """Validate, count and classify a five-card hand.

    Raises:
        InvalidHandError: If the hand is malformed
    """
    cards = validate_hand(hand)
    return classify_counts(aggregate_hand(cards))


def evaluate_poker_hand(hand: Any) -> str:
    """Classify a five-card hand and return its label.

    Args:
        hand: Five cards, each a Card, a (rank, suit) pair or a
            {"rank": int, "suit": str} mapping. Ranks run 1 (Ace) to 13 (King);
            suits are "club", "spade", "diamond" or "heart".

    Returns:
        One of: highcard, pair, twopair, threeofakind, straight, flush,
        fullhouse, fourofakind, straightflush, royalflush

    Raises:
        InvalidHandError: If the hand is not five cards or a card has an
            invalid rank or suit

    Example:
        >>> evaluate_poker_hand([(1, "heart"), (10, "heart"), (11, "heart"),
        ...                      (12, "heart"), (13, "heart")])
        'royalflush'
    """
    return classify_hand(hand).label


def describe_categories() -> dict:
    """Get a description of each category.

    Returns:
        Dict mapping Category to description string, highest precedence first
    """
    return {
        Category.ROYAL_FLUSH: "A 10, Jack, Queen, King and Ace of the same suit",
        Category.STRAIGHT_FLUSH: "Five cards of the same suit in sequence",
        Category.FOUR_OF_A_KIND: "Four cards of the same rank and any fifth card",
        Category.FULL_HOUSE: "Three cards of one rank and two cards of another rank",
        Category.FLUSH: "Five cards of the same suit",
        Category.STRAIGHT: "Five cards of mixed suits in sequence",
        Category.THREE_OF_A_KIND: "Three cards of the same rank plus two unequal cards",
        Category.TWO_PAIR: "Two pairs of different ranks",
        Category.PAIR: "Two cards of equal rank and three other unequal cards",
        Category.HIGH_CARD: "Five cards which do not form any other combination",
    }

