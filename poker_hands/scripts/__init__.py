"""Command-line entry points (run with ``python -m poker_hands.scripts.<name>``)."""
