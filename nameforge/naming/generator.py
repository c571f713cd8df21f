"""
naming/generator.py - Reference phonotactic name generator.

Draws one name from a NamingDomain using an explicit random stream:

    syllables  <- weighted syllable templates over weighted consonants/vowels
    word       <- weighted morphological structure (prefix / root / suffix)
    styled     <- apostrophe/hyphen markers at syllable boundaries + capitalization

The optimizer treats this as a black box with the signature
generate(domain, rng) -> str; any callable with that shape can replace it.
"""

from __future__ import annotations
from typing import List, Sequence, Tuple

from nameforge.core.domain import NamingDomain, PhonologyProfile, StyleRules
from nameforge.core.rng import RandomFn, chance, weighted_choice

CLUSTER_RATE = 0.15
MAX_ATTEMPTS = 8
MARKERS = ("'", "-")


def _uniform(rng: RandomFn, items: Sequence[str]) -> str:
    return items[int(rng() * len(items)) % len(items)]


def build_syllable(rng: RandomFn, phonology: PhonologyProfile) -> str:
    """Fill one weighted syllable template."""
    template = weighted_choice(rng, phonology.syllable_templates, phonology.template_weights)
    last = len(template) - 1
    parts = []

    for i, slot in enumerate(template):
        if slot == "C":
            # Favored clusters only replace edge consonants
            if phonology.favored_clusters and i in (0, last) and chance(rng, CLUSTER_RATE):
                parts.append(_uniform(rng, phonology.favored_clusters))
            else:
                parts.append(weighted_choice(rng, phonology.consonants, phonology.consonant_weights))
        elif slot == "V":
            parts.append(weighted_choice(rng, phonology.vowels, phonology.vowel_weights))
        else:
            parts.append(slot.lower())

    return "".join(parts)


def build_root(rng: RandomFn, phonology: PhonologyProfile) -> List[str]:
    """Syllables of one root."""
    lo, hi = phonology.syllable_range
    count = lo + int(rng() * (hi - lo + 1))
    return [build_syllable(rng, phonology) for _ in range(max(1, min(count, hi)))]


def compose(rng: RandomFn, domain: NamingDomain) -> List[str]:
    """Compose segments following a weighted morphological structure."""
    morphology = domain.morphology
    structure = weighted_choice(rng, morphology.structures, morphology.structure_weights)

    segments: List[str] = []
    for slot in structure.split("-"):
        if slot == "prefix" and morphology.prefixes:
            segments.append(_uniform(rng, morphology.prefixes))
        elif slot == "suffix" and morphology.suffixes:
            segments.append(_uniform(rng, morphology.suffixes))
        elif slot == "root":
            segments.extend(build_root(rng, domain.phonology))
    if not segments:
        segments = build_root(rng, domain.phonology)
    return segments


def syllable_boundaries(segments: Sequence[str]) -> List[int]:
    """Character offsets between consecutive segments."""
    boundaries = []
    offset = 0
    for segment in segments[:-1]:
        offset += len(segment)
        boundaries.append(offset)
    return boundaries


def insert_markers(rng: RandomFn, word: str, segments: Sequence[str], style: StyleRules) -> str:
    """Insert apostrophe / hyphen markers at distinct syllable boundaries."""
    want_apostrophe = style.apostrophe_rate > 0 and chance(rng, style.apostrophe_rate)
    want_hyphen = style.hyphen_rate > 0 and chance(rng, style.hyphen_rate)
    boundaries = syllable_boundaries(segments)

    if not (want_apostrophe or want_hyphen) or not boundaries:
        return word

    wanted = [m for m, want in zip(MARKERS, (want_apostrophe, want_hyphen)) if want]
    if len(wanted) > len(boundaries):
        wanted = [_uniform(rng, wanted)]

    # Pick distinct boundaries without replacement
    available = list(boundaries)
    placements: List[Tuple[int, str]] = []
    for marker in wanted:
        idx = int(rng() * len(available)) % len(available)
        placements.append((available.pop(idx), marker))

    # Insert from the right so offsets stay valid
    for position, marker in sorted(placements, reverse=True):
        word = word[:position] + marker + word[position:]
    return word


def capitalize(word: str, capitalization: str) -> str:
    if capitalization == "upper":
        return word.upper()
    if capitalization == "lower":
        return word.lower()
    return "-".join(part[:1].upper() + part[1:] for part in word.split("-"))


def letter_count(name: str) -> int:
    return sum(1 for ch in name if ch.isalpha())


def _truncate(name: str, max_letters: int) -> str:
    kept = []
    letters = 0
    for ch in name:
        if ch.isalpha():
            if letters >= max_letters:
                break
            letters += 1
        kept.append(ch)
    return "".join(kept).rstrip("".join(MARKERS))


def generate_name(domain: NamingDomain, rng: RandomFn) -> str:
    """
    Generate one name from a domain.

    Args:
        domain: Naming domain to draw from
        rng: Callable returning floats in [0, 1)

    Returns:
        Styled name. Up to MAX_ATTEMPTS draws are made to land inside the
        style's length window; a too-long final draw is truncated.
    """
    style = domain.style
    candidate = ""

    for _ in range(MAX_ATTEMPTS):
        segments = compose(rng, domain)
        candidate = insert_markers(rng, "".join(segments).lower(), segments, style)
        length = letter_count(candidate)
        if style.length_min <= length <= style.length_max:
            break

    if letter_count(candidate) > style.length_max:
        candidate = _truncate(candidate, style.length_max)

    return capitalize(candidate, style.capitalization)


def generate_sample(domain: NamingDomain, count: int, rng: RandomFn) -> List[str]:
    """Draw `count` names from one stream."""
    return [generate_name(domain, rng) for _ in range(count)]
