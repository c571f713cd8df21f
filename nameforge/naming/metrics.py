"""
naming/metrics.py - Reference validation metrics.

score_sample(names, sibling_samples, settings) returns six sub-scores, each
normalized to [0, 1] (higher is better):

    capacity          collision rate + character entropy
    diffuseness       5th percentile nearest-neighbour edit distance (strings and C/V shapes)
    separation        min bigram total-variation distance to sibling samples (0 without siblings)
    pronounceability  penalizes long consonant / vowel runs
    length            share of names inside the target length window
    style             share of names with well-formed apostrophe / hyphen markers

The fitness function applies weights to these as an unnormalized sum, so the
[0, 1] range is part of the contract.
"""

from __future__ import annotations
from collections import Counter
from typing import TYPE_CHECKING, Dict, List, Sequence
import math

import numpy as np

if TYPE_CHECKING:
    from nameforge.optimization.schema import ValidationSettings

VOWELS = frozenset("aeiouy")
MARKERS = frozenset("'-")

SCORE_KEYS = ("capacity", "diffuseness", "separation", "pronounceability", "length", "style")


def _letters(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch.isalpha())


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (ca != cb),
            ))
        previous = current
    return previous[-1]


def normalized_edit_distance(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    return edit_distance(a, b) / longest


def shape_of(name: str) -> str:
    """Consonant/vowel skeleton, e.g. 'Kaldor' -> 'CVCCVC'."""
    return "".join("V" if ch in VOWELS else "C" for ch in _letters(name))


def nearest_neighbor_distances(items: Sequence[str]) -> np.ndarray:
    """Normalized edit distance from each item to its nearest other item."""
    n = len(items)
    if n < 2:
        return np.zeros(n)
    nearest = np.ones(n)
    for i in range(n):
        for j in range(i + 1, n):
            d = normalized_edit_distance(items[i], items[j])
            if d < nearest[i]:
                nearest[i] = d
            if d < nearest[j]:
                nearest[j] = d
    return nearest


def character_entropy(names: Sequence[str]) -> float:
    """Shannon entropy (bits) of the letter distribution."""
    counts = Counter(ch for name in names for ch in _letters(name))
    total = sum(counts.values())
    if total == 0:
        return 0.0
    return -sum((c / total) * math.log2(c / total) for c in counts.values())


def bigram_distribution(names: Sequence[str]) -> Dict[str, float]:
    counts: Counter = Counter()
    for name in names:
        padded = "^" + _letters(name) + "$"
        counts.update(padded[i:i + 2] for i in range(len(padded) - 1))
    total = sum(counts.values())
    if total == 0:
        return {}
    return {k: v / total for k, v in counts.items()}


def total_variation(p: Dict[str, float], q: Dict[str, float]) -> float:
    keys = set(p) | set(q)
    return 0.5 * sum(abs(p.get(k, 0.0) - q.get(k, 0.0)) for k in keys)


# ==================== Sub-scores ====================

def capacity_score(names: Sequence[str]) -> float:
    if not names:
        return 0.0
    collision_rate = 1.0 - len(set(n.lower() for n in names)) / len(names)
    collision_score = max(0.0, 1.0 - collision_rate / 0.1)
    entropy_score = min(1.0, max(0.0, (character_entropy(names) - 2.0) / 3.0))
    return (collision_score + entropy_score) / 2


def diffuseness_score(names: Sequence[str], settings: "ValidationSettings") -> float:
    if len(names) < 2:
        return 0.0
    subset = [_letters(n) for n in names[:settings.max_pairwise_sample]]

    levenshtein_p5 = float(np.percentile(nearest_neighbor_distances(subset), 5))
    shape_p5 = float(np.percentile(nearest_neighbor_distances([shape_of(n) for n in subset]), 5))

    lev_score = min(1.0, levenshtein_p5 / settings.min_nn_p5) if settings.min_nn_p5 > 0 else 0.5
    shape_score = (
        min(1.0, shape_p5 / settings.min_shape_nn_p5) if settings.min_shape_nn_p5 > 0 else 0.5
    )
    return (lev_score + shape_score) / 2


def separation_score(
    names: Sequence[str],
    sibling_samples: Sequence[Sequence[str]],
    settings: "ValidationSettings",
) -> float:
    siblings = [s for s in sibling_samples if s]
    if not names or not siblings:
        return 0.0
    own = bigram_distribution(names)
    min_distance = min(total_variation(own, bigram_distribution(s)) for s in siblings)
    if settings.min_centroid_distance <= 0:
        return 0.5
    return min(1.0, min_distance / settings.min_centroid_distance)


def _max_run(letters: str, vowel: bool) -> int:
    longest = run = 0
    for ch in letters:
        if (ch in VOWELS) == vowel:
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return longest


def pronounceability_score(names: Sequence[str]) -> float:
    if not names:
        return 0.0
    total = 0.0
    for name in names:
        letters = _letters(name)
        if not letters or not any(ch in VOWELS for ch in letters):
            continue
        worst = max(_max_run(letters, vowel=False), _max_run(letters, vowel=True))
        if worst <= 2:
            total += 1.0
        elif worst == 3:
            total += 0.6
        else:
            total += 0.2
    return total / len(names)


def length_score(names: Sequence[str], settings: "ValidationSettings") -> float:
    if not names:
        return 0.0
    inside = sum(
        1 for n in names
        if settings.target_length_min <= len(_letters(n)) <= settings.target_length_max
    )
    return inside / len(names)


def _well_formed(name: str) -> bool:
    if not name or name[0] in MARKERS or name[-1] in MARKERS:
        return False
    markers = [i for i, ch in enumerate(name) if ch in MARKERS]
    if len(markers) > 2:
        return False
    return all(b - a > 1 for a, b in zip(markers, markers[1:]))


def style_score(names: Sequence[str]) -> float:
    if not names:
        return 0.0
    return sum(1 for n in names if _well_formed(n)) / len(names)


def score_sample(
    names: Sequence[str],
    sibling_samples: Sequence[Sequence[str]],
    settings: "ValidationSettings",
) -> Dict[str, float]:
    """Compute all six normalized sub-scores for a sample of names."""
    sample: List[str] = list(names)
    return {
        "capacity": capacity_score(sample),
        "diffuseness": diffuseness_score(sample, settings),
        "separation": separation_score(sample, sibling_samples, settings),
        "pronounceability": pronounceability_score(sample),
        "length": length_score(sample, settings),
        "style": style_score(sample),
    }
