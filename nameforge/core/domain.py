"""
core/domain.py - Naming domain data model.

A naming domain is the configuration the optimizer tunes. It bundles a
phonological profile (what sounds are available and how likely each is), a
morphological profile (how roots and affixes combine) and style rules
(capitalization, punctuation markers, output length window).

Instances are immutable: every candidate visited during a search is a new
NamingDomain produced by the parameter decoder.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Sequence, Tuple


def uniform_weights(items: Sequence[Any], value: float = 1.0) -> Tuple[float, ...]:
    """Equal weight for every item."""
    return tuple(float(value) for _ in items)


# ==================== Phonology ====================

@dataclass(frozen=True)
class PhonologyProfile:
    """
    Weighted inventory of consonants, vowels and syllable templates.

    Templates are strings over {C, V}, e.g. "CV" or "CVC".
    """
    consonants: Tuple[str, ...]
    vowels: Tuple[str, ...]
    syllable_templates: Tuple[str, ...] = ("CV", "CVC", "V")

    consonant_weights: Tuple[float, ...] = ()
    vowel_weights: Tuple[float, ...] = ()
    template_weights: Tuple[float, ...] = ()

    favored_clusters: Tuple[str, ...] = ()
    syllable_range: Tuple[int, int] = (1, 3)

    def __post_init__(self):
        # Missing weights default to uniform
        if not self.consonant_weights:
            object.__setattr__(self, "consonant_weights", uniform_weights(self.consonants))
        if not self.vowel_weights:
            object.__setattr__(self, "vowel_weights", uniform_weights(self.vowels))
        if not self.template_weights:
            object.__setattr__(self, "template_weights", uniform_weights(self.syllable_templates))

        if len(self.consonant_weights) != len(self.consonants):
            raise ValueError("consonant_weights must match consonants")
        if len(self.vowel_weights) != len(self.vowels):
            raise ValueError("vowel_weights must match vowels")
        if len(self.template_weights) != len(self.syllable_templates):
            raise ValueError("template_weights must match syllable_templates")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "consonants": list(self.consonants),
            "vowels": list(self.vowels),
            "syllable_templates": list(self.syllable_templates),
            "consonant_weights": list(self.consonant_weights),
            "vowel_weights": list(self.vowel_weights),
            "template_weights": list(self.template_weights),
            "favored_clusters": list(self.favored_clusters),
            "syllable_range": list(self.syllable_range),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PhonologyProfile":
        return cls(
            consonants=tuple(data["consonants"]),
            vowels=tuple(data["vowels"]),
            syllable_templates=tuple(data.get("syllable_templates", ("CV", "CVC", "V"))),
            consonant_weights=tuple(data.get("consonant_weights", ())),
            vowel_weights=tuple(data.get("vowel_weights", ())),
            template_weights=tuple(data.get("template_weights", ())),
            favored_clusters=tuple(data.get("favored_clusters", ())),
            syllable_range=tuple(data.get("syllable_range", (1, 3))),
        )


# ==================== Morphology ====================

@dataclass(frozen=True)
class MorphologyProfile:
    """
    Affix inventory and weighted word structures.

    A structure is a '-' separated sequence of slots drawn from
    {"prefix", "root", "suffix"}, e.g. "prefix-root" or "root-root".
    """
    prefixes: Tuple[str, ...] = ()
    suffixes: Tuple[str, ...] = ()
    structures: Tuple[str, ...] = ("root",)
    structure_weights: Tuple[float, ...] = ()

    def __post_init__(self):
        if not self.structure_weights:
            object.__setattr__(self, "structure_weights", uniform_weights(self.structures))
        if len(self.structure_weights) != len(self.structures):
            raise ValueError("structure_weights must match structures")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prefixes": list(self.prefixes),
            "suffixes": list(self.suffixes),
            "structures": list(self.structures),
            "structure_weights": list(self.structure_weights),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MorphologyProfile":
        return cls(
            prefixes=tuple(data.get("prefixes", ())),
            suffixes=tuple(data.get("suffixes", ())),
            structures=tuple(data.get("structures", ("root",))),
            structure_weights=tuple(data.get("structure_weights", ())),
        )


# ==================== Style ====================

@dataclass(frozen=True)
class StyleRules:
    """Surface styling applied after composition."""
    capitalization: str = "title"  # title / lower / upper
    apostrophe_rate: float = 0.0
    hyphen_rate: float = 0.0
    length_min: int = 3
    length_max: int = 12

    def to_dict(self) -> Dict[str, Any]:
        return {
            "capitalization": self.capitalization,
            "apostrophe_rate": self.apostrophe_rate,
            "hyphen_rate": self.hyphen_rate,
            "length_min": self.length_min,
            "length_max": self.length_max,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StyleRules":
        return cls(
            capitalization=data.get("capitalization", "title"),
            apostrophe_rate=float(data.get("apostrophe_rate", 0.0)),
            hyphen_rate=float(data.get("hyphen_rate", 0.0)),
            length_min=int(data.get("length_min", 3)),
            length_max=int(data.get("length_max", 12)),
        )


# ==================== Domain ====================

@dataclass(frozen=True)
class NamingDomain:
    """Complete naming configuration for one culture / entity kind."""
    id: str
    phonology: PhonologyProfile
    morphology: MorphologyProfile = field(default_factory=MorphologyProfile)
    style: StyleRules = field(default_factory=StyleRules)

    def with_changes(
        self,
        phonology: Optional[PhonologyProfile] = None,
        morphology: Optional[MorphologyProfile] = None,
        style: Optional[StyleRules] = None,
    ) -> "NamingDomain":
        """Copy of this domain with the given profiles swapped in."""
        return replace(
            self,
            phonology=phonology or self.phonology,
            morphology=morphology or self.morphology,
            style=style or self.style,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "phonology": self.phonology.to_dict(),
            "morphology": self.morphology.to_dict(),
            "style": self.style.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NamingDomain":
        return cls(
            id=data["id"],
            phonology=PhonologyProfile.from_dict(data["phonology"]),
            morphology=MorphologyProfile.from_dict(data.get("morphology", {})),
            style=StyleRules.from_dict(data.get("style", {})),
        )
