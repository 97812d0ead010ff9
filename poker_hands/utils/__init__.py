"""Shared utilities."""

from .seeding import make_rng, resolve_seed

__all__ = ["make_rng", "resolve_seed"]
