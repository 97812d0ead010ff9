"""Batched hand classification with PyTorch.

This module provides:
- Encoding of validated hands into rank / suit tensors
- Vectorized category computation for many hands at once

Tensor encoding (shape [batch, 5]):
- ranks: 1=A, 2-10, 11=J, 12=Q, 13=K
- suits: suit ordinal (0=club, 1=spade, 2=diamond, 3=heart)

Categories are the same IntEnum values as the scalar classifier.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, Union

import torch

from poker_hands.rules.cards import HAND_SIZE, NUM_RANKS, NUM_SUITS, Rank, card_pairs
from poker_hands.rules.hands import (
    BROADWAY_START,
    FOUR_OF_A_KIND_COUNT,
    MAX_RANK_SPAN,
    PAIR_COUNT,
    THREE_OF_A_KIND_COUNT,
    TWO_PAIR_COUNT,
    Category,
    HandErrorReason,
    InvalidHandError,
    validate_hand,
)


TensorLike = Union[torch.Tensor, Sequence[Sequence[int]]]


def encode_hands(
    hands: Sequence[Any], device: Optional[torch.device] = None
) -> Tuple[torch.Tensor, torch.Tensor]:
    """Validate hands and pack them into rank and suit tensors.

    Args:
        hands: List of hands in any form accepted by validate_hand
        device: Target device (default CPU)

    Returns:
        (ranks, suits), each a long tensor of shape [len(hands), 5]

    Raises:
        InvalidHandError: If any hand is malformed; ``hand`` is its position
    """
    device = device or torch.device("cpu")
    pairs = []
    for row, hand in enumerate(hands):
        try:
            cards = validate_hand(hand)
        except InvalidHandError as e:
            raise InvalidHandError(e.reason, f"Hand {row}: {e}", index=e.index, hand=row) from e
        pairs.append(card_pairs(cards))
    if not pairs:
        empty = torch.zeros((0, HAND_SIZE), dtype=torch.long, device=device)
        return empty, empty.clone()
    packed = torch.tensor(pairs, dtype=torch.long, device=device)
    return packed[..., 0].contiguous(), packed[..., 1].contiguous()


@dataclass
class BatchHandClassifier:
    """Vectorized five-card classifier.

    Keeps its lookup tensors on one device so whole batches are classified
    without leaving it.
    """

    device: torch.device

    broadway_mask: torch.Tensor  # [14] bool - A, 10, J, Q, K

    def __init__(self, device: Optional[torch.device] = None):
        self.device = device or torch.device("cpu")
        self._build_tensors()

    def _build_tensors(self):
        mask = torch.zeros(NUM_RANKS + 1, dtype=torch.bool, device=self.device)
        mask[int(Rank.ACE)] = True
        mask[BROADWAY_START : NUM_RANKS + 1] = True
        self.broadway_mask = mask

    def _as_long(self, values: TensorLike, reason: HandErrorReason, what: str) -> torch.Tensor:
        t = torch.as_tensor(values, device=self.device)
        if t.is_floating_point() or t.dtype == torch.bool:
            raise InvalidHandError(reason, f"Invalid {what} detected: {what}s must be integers.")
        return t.long()

    def _validate(self, ranks: torch.Tensor, suits: torch.Tensor):
        if ranks.shape != suits.shape:
            raise InvalidHandError(
                HandErrorReason.WRONG_CARDINALITY,
                "Rank and suit tensors must have the same shape "
                f"(got ranks {tuple(ranks.shape)}, suits {tuple(suits.shape)}).",
            )
        if ranks.dim() != 2:
            raise InvalidHandError(
                HandErrorReason.WRONG_CARDINALITY,
                f"Expected a [batch, {HAND_SIZE}] or [{HAND_SIZE}] tensor of cards "
                f"(got shape {tuple(ranks.shape)}).",
            )
        if ranks.shape[-1] != HAND_SIZE:
            raise InvalidHandError(
                HandErrorReason.WRONG_CARDINALITY,
                f"A valid poker hand must have exactly {HAND_SIZE} cards "
                f"(got {ranks.shape[-1]} per hand).",
            )

        bad_rank = (ranks < 1) | (ranks > NUM_RANKS)
        bad_suit = (suits < 0) | (suits >= NUM_SUITS)
        bad = (bad_rank | bad_suit).flatten()
        if not bool(bad.any()):
            return

        # Report the first bad card in row-major order, rank before suit
        flat_idx = int(torch.nonzero(bad)[0].item())
        row, col = divmod(flat_idx, HAND_SIZE)
        if bool(bad_rank[row, col]):
            raise InvalidHandError(
                HandErrorReason.INVALID_RANK,
                f"Invalid rank detected: {int(ranks[row, col])} (hand {row}, card {col}).",
                index=col,
                hand=row,
            )
        raise InvalidHandError(
            HandErrorReason.INVALID_SUIT,
            f"Invalid suit detected: {int(suits[row, col])} (hand {row}, card {col}).",
            index=col,
            hand=row,
        )

    def classify(self, ranks: TensorLike, suits: TensorLike) -> torch.Tensor:
        """Classify a batch of hands.

        Args:
            ranks: [batch, 5] integer ranks in [1, 13]; a single [5] hand is
                treated as a batch of one
            suits: [batch, 5] integer suit ordinals in [0, 3], same shape

        Returns:
            [batch] long tensor of Category values

        Raises:
            InvalidHandError: If shapes or values are out of range
        """
        ranks = self._as_long(ranks, HandErrorReason.INVALID_RANK, "rank")
        suits = self._as_long(suits, HandErrorReason.INVALID_SUIT, "suit")
        if ranks.dim() == 1 and suits.dim() == 1:
            ranks, suits = ranks.unsqueeze(0), suits.unsqueeze(0)
        self._validate(ranks, suits)

        batch = ranks.shape[0]
        ones = torch.ones_like(ranks)

        rank_counts = torch.zeros((batch, NUM_RANKS + 1), dtype=torch.long, device=self.device)
        rank_counts.scatter_add_(1, ranks, ones)
        suit_counts = torch.zeros((batch, NUM_SUITS), dtype=torch.long, device=self.device)
        suit_counts.scatter_add_(1, suits, ones)

        present = rank_counts > 0
        num_distinct = present.sum(dim=1)

        flush = suit_counts.max(dim=1).values == HAND_SIZE
        # Five distinct ranks out of A, 10, J, Q, K is exactly Broadway
        royal = (present & self.broadway_mask).sum(dim=1) == HAND_SIZE
        span = ranks.max(dim=1).values - ranks.min(dim=1).values
        straight = ((num_distinct == HAND_SIZE) & (span == MAX_RANK_SPAN)) | royal

        has_four = (rank_counts == FOUR_OF_A_KIND_COUNT).any(dim=1)
        has_three = (rank_counts == THREE_OF_A_KIND_COUNT).any(dim=1)
        num_pairs = (rank_counts == PAIR_COUNT).sum(dim=1)

        # Lowest precedence first so later (higher) matches overwrite
        rules = [
            (num_pairs > 0, Category.PAIR),
            (num_pairs == TWO_PAIR_COUNT, Category.TWO_PAIR),
            (has_three, Category.THREE_OF_A_KIND),
            (straight, Category.STRAIGHT),
            (flush, Category.FLUSH),
            (has_three & (num_pairs > 0), Category.FULL_HOUSE),
            (has_four, Category.FOUR_OF_A_KIND),
            (flush & straight, Category.STRAIGHT_FLUSH),
            (flush & royal, Category.ROYAL_FLUSH),
        ]

        result = torch.full(
            (batch,), int(Category.HIGH_CARD), dtype=torch.long, device=self.device
        )
        for matched, category in rules:
            result = torch.where(matched, torch.full_like(result, int(category)), result)
        return result

    def categories(self, ranks: TensorLike, suits: TensorLike) -> List[Category]:
        """Classify a batch and return Category members."""
        return [Category(v) for v in self.classify(ranks, suits).tolist()]

    def labels(self, ranks: TensorLike, suits: TensorLike) -> List[str]:
        """Classify a batch and return the string labels."""
        return [c.label for c in self.categories(ranks, suits)]

    def classify_hands(self, hands: Sequence[Any]) -> List[Category]:
        """Validate, encode and classify a list of hands."""
        ranks, suits = encode_hands(hands, self.device)
        return self.categories(ranks, suits)
