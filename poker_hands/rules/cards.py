"""Card rank and suit definitions and utilities.

Rank values follow the printed face value: A=1, 2-10 literal, J=11, Q=12, K=13.
Suits carry a lowercase wire name (club, spade, diamond, heart) and an ordinal
used to index fixed-size count arrays.

This module provides:
- Rank and suit constants
- Card representation and parsing
- Normalisation of loose card-like inputs
- Deck helpers
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List, Tuple


class Rank(IntEnum):
    """Card ranks by face value (Ace is low, 1)."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13


class Suit(IntEnum):
    """Card suits. The value is the index into a suit count array."""

    CLUB = 0
    SPADE = 1
    DIAMOND = 2
    HEART = 3

    @property
    def label(self) -> str:
        """Lowercase wire name, e.g. "club"."""
        return self.name.lower()


HAND_SIZE = 5
NUM_RANKS = 13
NUM_SUITS = 4

VALID_RANKS = frozenset(int(r) for r in Rank)
VALID_SUITS = ("club", "spade", "diamond", "heart")

SUIT_BY_LABEL = {s.label: s for s in Suit}

# Rank symbols for display
RANK_SYMBOLS = {
    Rank.ACE: "A",
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "10",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
}

# Suit symbols for display
SUIT_SYMBOLS = {
    Suit.CLUB: "♣",
    Suit.SPADE: "♠",
    Suit.DIAMOND: "♦",
    Suit.HEART: "♥",
}

# Symbol to rank mapping (for parsing)
SYMBOL_TO_RANK = {v: k for k, v in RANK_SYMBOLS.items()}
SYMBOL_TO_RANK["T"] = Rank.TEN

SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}
SYMBOL_TO_SUIT.update({"C": Suit.CLUB, "S": Suit.SPADE, "D": Suit.DIAMOND, "H": Suit.HEART})
SYMBOL_TO_SUIT.update({"c": Suit.CLUB, "s": Suit.SPADE, "d": Suit.DIAMOND, "h": Suit.HEART})


@dataclass(frozen=True, order=True)
class Card:
    """A playing card with rank and suit.

    Construction does not check the fields: hands are checked as a whole by
    ``validate_hand`` so that a bad card is reported with its position.
    """

    rank: Any
    suit: Any

    def __str__(self) -> str:
        try:
            return f"{RANK_SYMBOLS[Rank(self.rank)]}{SUIT_SYMBOLS[self.suit]}"
        except (KeyError, TypeError, ValueError):
            return f"{self.rank!r}/{self.suit!r}"

    def __repr__(self) -> str:
        return f"Card({self})"

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Parse a card from string like 'AH', '10♠' or 'td'.

        Args:
            s: Card string in format "RANK+SUIT"

        Returns:
            Card object

        Raises:
            ValueError: If string cannot be parsed
        """
        s = s.strip()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s!r}")

        suit_char = s[-1]
        rank_str = s[:-1].upper()

        if suit_char not in SYMBOL_TO_SUIT:
            raise ValueError(f"Invalid suit character: {suit_char}")
        if rank_str not in SYMBOL_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_str}")

        return cls(rank=SYMBOL_TO_RANK[rank_str], suit=SYMBOL_TO_SUIT[suit_char])

    def to_dict(self) -> dict:
        """Wire form: {"rank": int, "suit": "club"}."""
        return {"rank": int(self.rank), "suit": Suit(self.suit).label}


def coerce_card(obj: Any) -> Card:
    """Normalise one card-like input to a Card without validating it.

    Accepts a Card, a (rank, suit) pair, or a mapping with "rank" and "suit"
    keys. Suit wire names are converted to Suit members; anything that is not
    recognised is kept as-is for the validator to report. Inputs with no
    readable rank come back as ``Card(None, None)``.
    """
    if isinstance(obj, Card):
        rank, suit = obj.rank, obj.suit
    elif isinstance(obj, Mapping):
        rank, suit = obj.get("rank"), obj.get("suit")
    elif isinstance(obj, Sequence) and not isinstance(obj, (str, bytes)) and len(obj) == 2:
        rank, suit = obj
    else:
        return Card(rank=None, suit=None)

    if isinstance(suit, str) and suit in SUIT_BY_LABEL:
        suit = SUIT_BY_LABEL[suit]
    if is_valid_rank(rank):
        rank = Rank(rank)
    return Card(rank=rank, suit=suit)


def is_valid_rank(rank: Any) -> bool:
    """Check that rank is an integer in [1, 13]. Booleans are rejected."""
    return isinstance(rank, int) and not isinstance(rank, bool) and rank in VALID_RANKS


def is_valid_suit(suit: Any) -> bool:
    """Check that suit is a Suit member or one of the exact wire names."""
    if isinstance(suit, Suit):
        return True
    return isinstance(suit, str) and suit in SUIT_BY_LABEL


def create_standard_deck() -> List[Card]:
    """Create a standard 52-card deck.

    Returns:
        List of 52 Card objects (13 ranks × 4 suits)
    """
    deck = []
    for suit in Suit:
        for rank in Rank:
            deck.append(Card(rank=rank, suit=suit))
    return deck


def sort_cards(cards: List[Card]) -> List[Card]:
    """Sort cards by rank (ascending), then by suit."""
    return sorted(cards)


def make_cards_from_string(s: str) -> List[Card]:
    """Parse cards from a string like "AH 10H JH QH KH".

    Args:
        s: Space-separated card strings

    Returns:
        List of Card objects
    """
    return [Card.from_string(cs) for cs in s.split()]


def card_pairs(cards: Sequence[Card]) -> List[Tuple[int, int]]:
    """(rank, suit ordinal) integer pairs for a list of valid cards."""
    return [(int(c.rank), int(c.suit)) for c in cards]
