"""
core/rng.py - Deterministic random streams.

Every stochastic call in the engine receives an explicit stream created here.
There is no global random source: the same seed string always yields the
same sequence of draws.
"""

from __future__ import annotations
import hashlib
import random
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")

RandomFn = Callable[[], float]


def seed_to_int(seed: str) -> int:
    """Stable 64-bit integer from a seed string."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def create_rng(seed: str) -> random.Random:
    """Create an independent random stream from a seed string."""
    return random.Random(seed_to_int(seed))


def derive_seed(run_seed: str, *parts: object) -> str:
    """Child seed for a sub-stream, e.g. derive_seed(run, iteration, index)."""
    return ":".join([run_seed] + [str(p) for p in parts])


def weighted_choice(rng: RandomFn, items: Sequence[T], weights: Sequence[float]) -> T:
    """Pick one item with probability proportional to its weight."""
    if not items:
        raise ValueError("Cannot choose from an empty sequence")
    total = sum(max(0.0, w) for w in weights)
    if total <= 0:
        return items[int(rng() * len(items)) % len(items)]

    threshold = rng() * total
    cumulative = 0.0
    for item, weight in zip(items, weights):
        cumulative += max(0.0, weight)
        if threshold < cumulative:
            return item
    return items[-1]


def chance(rng: RandomFn, probability: float) -> bool:
    return rng() < probability
