#!/usr/bin/env python
"""Classify five-card poker hands from the command line.

Hands are given as quoted strings of five card tokens (rank then suit, e.g.
"AH 10H JH QH KH"), or sampled at random from a shuffled deck to show how
often each category turns up.

Usage:
    python -m poker_hands.scripts.classify "AH 10H JH QH KH" "2S 3S 4S 5S 6S"
    python -m poker_hands.scripts.classify --random 10000 --seed 42
    python -m poker_hands.scripts.classify "7C 7S 7D 7H 2C" --json
    python -m poker_hands.scripts.classify --help
"""

import argparse
import json
import random
import sys
from collections import Counter
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from poker_hands.rules import (
    HAND_SIZE,
    Card,
    Category,
    CATEGORY_PRECEDENCE,
    classify_hand,
    create_standard_deck,
    make_cards_from_string,
    sort_cards,
)
from poker_hands.rules.batch import BatchHandClassifier
from poker_hands.utils.seeding import make_rng


# Exit status for malformed input
EXIT_INVALID_HAND = 2

CATEGORY_STYLES = {
    Category.ROYAL_FLUSH: "bold magenta",
    Category.STRAIGHT_FLUSH: "bold red",
    Category.FOUR_OF_A_KIND: "red",
    Category.FULL_HOUSE: "yellow",
    Category.FLUSH: "cyan",
    Category.STRAIGHT: "green",
}


def sample_hands(count: int, rng: random.Random) -> List[List[Card]]:
    """Deal `count` independent hands, each from a freshly shuffled deck."""
    deck = create_standard_deck()
    hands = []
    for _ in range(count):
        rng.shuffle(deck)
        hands.append(deck[:HAND_SIZE])
    return hands


def format_hand(cards: Sequence[Card]) -> str:
    return " ".join(str(c) for c in sort_cards(list(cards)))


def classify_strings(hand_strings: Sequence[str]) -> List[dict]:
    """Parse and classify each hand string.

    Raises:
        ValueError: If a card token cannot be parsed
        InvalidHandError: If a hand is malformed
    """
    results = []
    for s in hand_strings:
        cards = make_cards_from_string(s)
        category = classify_hand(cards)
        results.append({"hand": s, "cards": cards, "category": category})
    return results


def render_results(console: Console, results: Sequence[dict]):
    table = Table(title="Hands", box=box.SIMPLE_HEAVY)
    table.add_column("Hand")
    table.add_column("Category")
    for row in results:
        category = row["category"]
        style = CATEGORY_STYLES.get(category, "")
        table.add_row(format_hand(row["cards"]), f"[{style}]{category.label}[/{style}]" if style else category.label)
    console.print(table)


def render_distribution(console: Console, counts: Counter, total: int, seed: int):
    table = Table(title=f"Category distribution ({total} hands, seed={seed})", box=box.SIMPLE_HEAVY)
    table.add_column("Category")
    table.add_column("Count", justify="right")
    table.add_column("Share", justify="right")
    for category in CATEGORY_PRECEDENCE:
        n = counts.get(category, 0)
        share = n / total if total else 0.0
        table.add_row(category.label, str(n), f"{share:.4%}")
    console.print(table)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the classify script."""
    parser = argparse.ArgumentParser(
        description="Classify five-card poker hands",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m poker_hands.scripts.classify "AH 10H JH QH KH"
  python -m poker_hands.scripts.classify "5C 5S 5D 9H 9C" "2H 3S 4D 5C 6S" --json
  python -m poker_hands.scripts.classify --random 10000 --seed 42
        """,
    )

    parser.add_argument(
        "hands",
        nargs="*",
        help='Hands to classify, each a quoted string of five cards, e.g. "AH 10H JH QH KH"',
    )

    parser.add_argument(
        "--random",
        "-n",
        type=int,
        default=0,
        metavar="N",
        help="Sample N random hands and print the category distribution",
    )

    parser.add_argument(
        "--seed", "-s", type=int, default=None, help="Random seed for reproducibility"
    )

    parser.add_argument(
        "--json", action="store_true", help="Print JSON instead of a table"
    )

    args = parser.parse_args(argv)
    console = Console()

    if not args.hands and args.random <= 0:
        parser.print_usage()
        console.print("[red]Error: give at least one hand or --random N[/red]")
        return EXIT_INVALID_HAND

    output = {}

    try:
        results = classify_strings(args.hands)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return EXIT_INVALID_HAND

    if results:
        output["hands"] = [
            {
                "hand": r["hand"],
                "cards": [c.to_dict() for c in r["cards"]],
                "category": r["category"].label,
            }
            for r in results
        ]
        if not args.json:
            render_results(console, results)

    if args.random > 0:
        rng, seed = make_rng(args.seed)
        hands = sample_hands(args.random, rng)
        categories = BatchHandClassifier().classify_hands(hands)
        counts = Counter(categories)
        output["distribution"] = {c.label: counts.get(c, 0) for c in CATEGORY_PRECEDENCE}
        output["seed"] = seed
        if not args.json:
            render_distribution(console, counts, len(hands), seed)

    if args.json:
        print(json.dumps(output, indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
