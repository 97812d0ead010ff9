"""Parity checks for the batched torch classifier against the scalar one.

Test coverage:
- Same category as classify_hand for random dealt hands and random hands
  with repeated cards
- Exact category counts over every five-card hand from one deck
- Shape, range and dtype validation of batched inputs
"""

import itertools
import random
from collections import Counter

import numpy as np
import pytest
import torch

from poker_hands.rules import (
    Category,
    HandErrorReason,
    InvalidHandError,
    Suit,
    classify_hand,
    create_standard_deck,
    make_cards_from_string,
)
from poker_hands.rules.batch import BatchHandClassifier, encode_hands


@pytest.fixture(scope="module")
def classifier():
    return BatchHandClassifier(torch.device("cpu"))


def _make_random_hand(rng: random.Random, deck) -> list:
    rng.shuffle(deck)
    return deck[:5]


class TestParity:
    """Batched results must match the scalar classifier hand for hand."""

    def test_dealt_hands_match_scalar(self, classifier):
        rng = random.Random(123)
        deck = create_standard_deck()
        hands = [list(_make_random_hand(rng, deck)) for _ in range(2000)]

        batched = classifier.classify_hands(hands)
        assert batched == [classify_hand(h) for h in hands]

    def test_hands_with_repeated_cards_match_scalar(self, classifier):
        rng = random.Random(456)
        hands = [
            [(rng.randint(1, 13), Suit(rng.randint(0, 3))) for _ in range(5)]
            for _ in range(2000)
        ]

        batched = classifier.classify_hands(hands)
        assert batched == [classify_hand(h) for h in hands]

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("AH 10H JH QH KH", Category.ROYAL_FLUSH),
            ("2S 3S 4S 5S 6S", Category.STRAIGHT_FLUSH),
            ("AD 2D 3D 4D 5D", Category.STRAIGHT_FLUSH),
            ("7C 7S 7D 7H 2C", Category.FOUR_OF_A_KIND),
            ("5C 5S 5D 9H 9C", Category.FULL_HOUSE),
            ("2H 5H 9H JH KH", Category.FLUSH),
            ("2H 3S 4D 5C 6S", Category.STRAIGHT),
            ("AC 10H JH QH KH", Category.STRAIGHT),
            ("8C 8S 8D 2H 5C", Category.THREE_OF_A_KIND),
            ("3C 3S 9D 9H KC", Category.TWO_PAIR),
            ("4C 4S 9D JH KC", Category.PAIR),
            ("2H 5S 9D JC KH", Category.HIGH_CARD),
            ("JC QS KD AH 2C", Category.HIGH_CARD),
        ],
    )
    def test_known_hands(self, classifier, text, expected):
        cards = make_cards_from_string(text)
        assert classifier.classify_hands([cards]) == [expected]
        assert classify_hand(cards) == expected

    def test_labels(self, classifier):
        ranks, suits = encode_hands(
            [make_cards_from_string("AH 10H JH QH KH"), make_cards_from_string("2H 5S 9D JC KH")]
        )
        assert classifier.labels(ranks, suits) == ["royalflush", "highcard"]

    def test_every_hand_in_a_deck(self, classifier):
        """Category counts over all C(52, 5) hands."""
        combos = np.fromiter(
            itertools.chain.from_iterable(itertools.combinations(range(52), 5)),
            dtype=np.int64,
        ).reshape(-1, 5)
        assert combos.shape[0] == 2598960

        counts = Counter()
        for chunk in np.array_split(combos, 8):
            idx = torch.from_numpy(chunk)
            ranks = idx % 13 + 1
            suits = idx // 13
            values, freq = torch.unique(classifier.classify(ranks, suits), return_counts=True)
            for v, n in zip(values.tolist(), freq.tolist()):
                counts[Category(v)] += n

        assert counts == {
            Category.ROYAL_FLUSH: 4,
            Category.STRAIGHT_FLUSH: 36,
            Category.FOUR_OF_A_KIND: 624,
            Category.FULL_HOUSE: 3744,
            Category.FLUSH: 5108,
            Category.STRAIGHT: 10200,
            Category.THREE_OF_A_KIND: 54912,
            Category.TWO_PAIR: 123552,
            Category.PAIR: 1098240,
            Category.HIGH_CARD: 1302540,
        }


class TestBatchValidation:
    """Malformed batches raise the same errors as the scalar validator."""

    def test_wrong_hand_size(self, classifier):
        ranks = torch.ones((3, 4), dtype=torch.long)
        suits = torch.zeros((3, 4), dtype=torch.long)
        with pytest.raises(InvalidHandError, match="exactly 5 cards") as excinfo:
            classifier.classify(ranks, suits)
        assert excinfo.value.reason == HandErrorReason.WRONG_CARDINALITY

    def test_mismatched_shapes(self, classifier):
        with pytest.raises(InvalidHandError) as excinfo:
            classifier.classify(torch.ones((2, 5), dtype=torch.long), torch.zeros((3, 5), dtype=torch.long))
        assert excinfo.value.reason == HandErrorReason.WRONG_CARDINALITY

    @pytest.mark.parametrize("bad_rank", [0, 14])
    def test_invalid_rank(self, classifier, bad_rank):
        ranks = torch.tensor([[2, 3, 4, 5, 6], [2, 3, bad_rank, 5, 6]])
        suits = torch.zeros((2, 5), dtype=torch.long)
        with pytest.raises(InvalidHandError, match="hand 1, card 2") as excinfo:
            classifier.classify(ranks, suits)
        assert excinfo.value.reason == HandErrorReason.INVALID_RANK
        assert excinfo.value.index == 2
        assert excinfo.value.hand == 1

    @pytest.mark.parametrize("bad_suit", [-1, 4])
    def test_invalid_suit(self, classifier, bad_suit):
        ranks = torch.tensor([[2, 3, 4, 5, 6]])
        suits = torch.tensor([[0, 0, 0, 0, bad_suit]])
        with pytest.raises(InvalidHandError) as excinfo:
            classifier.classify(ranks, suits)
        assert excinfo.value.reason == HandErrorReason.INVALID_SUIT
        assert excinfo.value.index == 4

    def test_rank_reported_before_suit(self, classifier):
        ranks = torch.tensor([[0, 3, 4, 5, 6]])
        suits = torch.tensor([[9, 0, 0, 0, 0]])
        with pytest.raises(InvalidHandError) as excinfo:
            classifier.classify(ranks, suits)
        assert excinfo.value.reason == HandErrorReason.INVALID_RANK

    def test_float_ranks_rejected(self, classifier):
        with pytest.raises(InvalidHandError) as excinfo:
            classifier.classify(torch.ones((1, 5)), torch.zeros((1, 5), dtype=torch.long))
        assert excinfo.value.reason == HandErrorReason.INVALID_RANK

    def test_encode_rejects_bad_hand(self):
        with pytest.raises(InvalidHandError) as excinfo:
            encode_hands([make_cards_from_string("AH 2H 3H 4H")])
        assert excinfo.value.reason == HandErrorReason.WRONG_CARDINALITY

    def test_encode_reports_hand_position(self):
        hands = [
            make_cards_from_string("AH 10H JH QH KH"),
            make_cards_from_string("2H 5S 9D JC KH"),
            [(2, "heart"), (5, "spade"), (9, "diamond"), (11, "club"), (13, "x")],
        ]
        with pytest.raises(InvalidHandError, match="^Hand 2: ") as excinfo:
            encode_hands(hands)
        assert excinfo.value.reason == HandErrorReason.INVALID_SUIT
        assert excinfo.value.index == 4
        assert excinfo.value.hand == 2

    def test_empty_batch(self, classifier):
        ranks, suits = encode_hands([])
        assert ranks.shape == (0, 5)
        assert classifier.classify(ranks, suits).shape == (0,)
        assert classifier.classify_hands([]) == []

    def test_accepts_nested_lists(self, classifier):
        result = classifier.classify([[1, 10, 11, 12, 13]], [[3, 3, 3, 3, 3]])
        assert result.tolist() == [int(Category.ROYAL_FLUSH)]

    def test_single_hand_without_batch_dimension(self, classifier):
        result = classifier.classify(torch.tensor([1, 10, 11, 12, 13]), torch.tensor([3] * 5))
        assert result.tolist() == [int(Category.ROYAL_FLUSH)]

    def test_higher_rank_tensors_rejected_as_shape_error(self, classifier):
        ranks = torch.ones((2, 2, 5), dtype=torch.long)
        with pytest.raises(InvalidHandError, match="Expected a \\[batch, 5\\]") as excinfo:
            classifier.classify(ranks, torch.zeros_like(ranks))
        assert excinfo.value.reason == HandErrorReason.WRONG_CARDINALITY
