"""
core/parameter_bounds.py - Parameter bounds for decoding and clamping.

All clamping of optimizer parameters lives here. Decoding a parameter vector
always clamps into these bounds (bounds policy "clamp"), for every strategy.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from nameforge.errors import ConfigurationError


BOUND_FIELDS = ("weight", "apostrophe_rate", "hyphen_rate", "length_min", "length_max")


@dataclass(frozen=True)
class ParameterBounds:
    """
    Per-field [min, max] ranges.

    `weight` applies element-wise to every consonant, vowel, template and
    structure weight.
    """
    weight: Tuple[float, float] = (0.01, 10.0)
    apostrophe_rate: Tuple[float, float] = (0.0, 0.5)
    hyphen_rate: Tuple[float, float] = (0.0, 0.5)
    length_min: Tuple[float, float] = (2.0, 10.0)
    length_max: Tuple[float, float] = (4.0, 20.0)

    def validate(self) -> None:
        """Raise ConfigurationError for empty or inverted ranges."""
        for name in BOUND_FIELDS:
            bound = getattr(self, name)
            if bound is None or len(bound) != 2:
                raise ConfigurationError(
                    f"Bounds for '{name}' must be a (min, max) pair",
                    field=f"bounds.{name}",
                )
            lo, hi = bound
            if lo > hi:
                raise ConfigurationError(
                    f"Bounds for '{name}' are inverted: [{lo}, {hi}]",
                    field=f"bounds.{name}",
                )
        if self.length_min[0] > self.length_max[1]:
            raise ConfigurationError(
                "length_min lower bound exceeds length_max upper bound",
                field="bounds.length_min",
            )

    def range_of(self, name: str) -> float:
        """Width of the range for a field."""
        lo, hi = getattr(self, name)
        return hi - lo

    def clamp(self, name: str, value: float) -> float:
        """Clamp value to the bounds of a field."""
        lo, hi = getattr(self, name)
        return max(lo, min(hi, value))

    def normalize(self, name: str, value: float) -> float:
        """Map value to [0, 1] within the field's range."""
        lo, hi = getattr(self, name)
        if hi == lo:
            return 0.0
        return (value - lo) / (hi - lo)

    def denormalize(self, name: str, normalized: float) -> float:
        """Map [0, 1] back to the field's range."""
        lo, hi = getattr(self, name)
        return lo + normalized * (hi - lo)

    def to_dict(self) -> Dict[str, Any]:
        return {name: list(getattr(self, name)) for name in BOUND_FIELDS}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParameterBounds":
        defaults = cls()
        return cls(**{
            name: tuple(data.get(name, getattr(defaults, name)))
            for name in BOUND_FIELDS
        })


DEFAULT_BOUNDS = ParameterBounds()
