"""
naming/ - Reference generation and validation collaborators.

The optimizer consumes these through two signatures only:

    generate(domain, rng) -> str
    score(names, sibling_samples, settings) -> {capacity, diffuseness, separation,
                                                pronounceability, length, style}
"""

from .generator import generate_name, generate_sample
from .metrics import score_sample, SCORE_KEYS

__all__ = [
    "generate_name",
    "generate_sample",
    "score_sample",
    "SCORE_KEYS",
]
