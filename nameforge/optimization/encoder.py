"""
optimization/encoder.py - Parameter codec.

Bidirectional mapping between a NamingDomain and a flat, bounded numeric
vector, plus the move operators the search strategies use on that vector:

    encode / decode     domain <-> ParameterVector (decode clamps into bounds)
    perturb             zero-mean Gaussian step per field class (local search)
    crossover / mutate  genetic operators
    distance            normalized Euclidean metric over the unit cube

None of the operators mutate their inputs; vectors are frozen.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Set, Tuple
import math
import random

import numpy as np

from nameforge.core.domain import NamingDomain
from nameforge.core.parameter_bounds import DEFAULT_BOUNDS, ParameterBounds
from nameforge.errors import ShapeMismatchError

WEIGHT_FIELDS = ("consonant_weights", "vowel_weights", "template_weights", "structure_weights")
RATE_FIELDS = ("apostrophe_rate", "hyphen_rate")
LENGTH_FIELDS = ("length_min", "length_max")
SCALAR_FIELDS = RATE_FIELDS + LENGTH_FIELDS

# Step-size class -> vector fields it scales
STEP_SIZE_CLASSES: Dict[str, Tuple[str, ...]] = {
    "weights": WEIGHT_FIELDS,
    "apostrophe_rate": ("apostrophe_rate",),
    "hyphen_rate": ("hyphen_rate",),
    "length_range": LENGTH_FIELDS,
}

# GA mutation sigma as a fraction of the field's bound range
MUTATION_SIGMA = 0.15


@dataclass(frozen=True)
class ParameterVector:
    """Flat encoding of a domain's tunable fields."""
    consonant_weights: Tuple[float, ...]
    vowel_weights: Tuple[float, ...]
    template_weights: Tuple[float, ...]
    structure_weights: Tuple[float, ...]
    apostrophe_rate: float
    hyphen_rate: float
    length_min: float
    length_max: float

    @property
    def shape(self) -> Tuple[int, int, int, int]:
        """Lengths of the four weight sequences."""
        return tuple(len(getattr(self, name)) for name in WEIGHT_FIELDS)

    @property
    def size(self) -> int:
        return sum(self.shape) + len(SCALAR_FIELDS)

    def flatten(self) -> List[float]:
        values: List[float] = []
        for name in WEIGHT_FIELDS:
            values.extend(getattr(self, name))
        values.extend(getattr(self, name) for name in SCALAR_FIELDS)
        return values

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {name: [round(v, 6) for v in getattr(self, name)] for name in WEIGHT_FIELDS}
        data.update({name: round(getattr(self, name), 6) for name in SCALAR_FIELDS})
        return data


def _bound_name(field_name: str) -> str:
    return "weight" if field_name in WEIGHT_FIELDS else field_name


def check_shape(a: ParameterVector, b: ParameterVector) -> None:
    """Raise ShapeMismatchError unless both vectors share a shape."""
    for name in WEIGHT_FIELDS:
        expected, actual = len(getattr(a, name)), len(getattr(b, name))
        if expected != actual:
            raise ShapeMismatchError(name, expected, actual)


def field_classes(vector: ParameterVector) -> Set[str]:
    """Step-size classes that have at least one field in the vector."""
    classes = {"apostrophe_rate", "hyphen_rate", "length_range"}
    if any(vector.shape):
        classes.add("weights")
    return classes


# =============================================================================
# ENCODE / DECODE
# =============================================================================

def encode(domain: NamingDomain) -> ParameterVector:
    """Extract the tunable numeric fields of a domain."""
    phonology = domain.phonology
    return ParameterVector(
        consonant_weights=tuple(float(w) for w in phonology.consonant_weights),
        vowel_weights=tuple(float(w) for w in phonology.vowel_weights),
        template_weights=tuple(float(w) for w in phonology.template_weights),
        structure_weights=tuple(float(w) for w in domain.morphology.structure_weights),
        apostrophe_rate=float(domain.style.apostrophe_rate),
        hyphen_rate=float(domain.style.hyphen_rate),
        length_min=float(domain.style.length_min),
        length_max=float(domain.style.length_max),
    )


def clamp_vector(vector: ParameterVector, bounds: ParameterBounds = DEFAULT_BOUNDS) -> ParameterVector:
    """
    Clamp every field into bounds and repair length_min <= length_max.

    Length fields stay continuous here; decode rounds them.
    """
    weights = {
        name: tuple(bounds.clamp("weight", w) for w in getattr(vector, name))
        for name in WEIGHT_FIELDS
    }
    length_min = bounds.clamp("length_min", vector.length_min)
    length_max = bounds.clamp("length_max", vector.length_max)
    if length_min > length_max:
        length_max = length_min

    return ParameterVector(
        apostrophe_rate=bounds.clamp("apostrophe_rate", vector.apostrophe_rate),
        hyphen_rate=bounds.clamp("hyphen_rate", vector.hyphen_rate),
        length_min=length_min,
        length_max=length_max,
        **weights,
    )


def decode(
    vector: ParameterVector,
    template: NamingDomain,
    bounds: ParameterBounds = DEFAULT_BOUNDS,
) -> NamingDomain:
    """
    Overlay a vector onto a template domain.

    Fields the vector does not cover (ids, inventories, affixes,
    capitalization) are copied from the template. Values outside bounds are
    clamped.
    """
    check_shape(encode(template), vector)
    clamped = clamp_vector(vector, bounds)

    length_min = int(round(clamped.length_min))
    length_max = max(length_min, int(round(clamped.length_max)))

    phonology = replace(
        template.phonology,
        consonant_weights=clamped.consonant_weights,
        vowel_weights=clamped.vowel_weights,
        template_weights=clamped.template_weights,
    )
    morphology = replace(template.morphology, structure_weights=clamped.structure_weights)
    style = replace(
        template.style,
        apostrophe_rate=clamped.apostrophe_rate,
        hyphen_rate=clamped.hyphen_rate,
        length_min=length_min,
        length_max=length_max,
    )
    return template.with_changes(phonology=phonology, morphology=morphology, style=style)


# =============================================================================
# MOVE OPERATORS
# =============================================================================

def perturb(
    vector: ParameterVector,
    step_sizes: Mapping[str, float],
    rng: random.Random,
) -> ParameterVector:
    """
    Independent zero-mean Gaussian noise on every field.

    Each field class is scaled by its entry in step_sizes ("weights",
    "apostrophe_rate", "hyphen_rate", "length_range"). The result is not
    clamped; pass it through clamp_vector or decode.
    """
    changes: Dict[str, Any] = {}
    for step_class, fields in STEP_SIZE_CLASSES.items():
        sigma = step_sizes[step_class]
        for name in fields:
            value = getattr(vector, name)
            if name in WEIGHT_FIELDS:
                changes[name] = tuple(w + rng.gauss(0.0, sigma) for w in value)
            else:
                changes[name] = value + rng.gauss(0.0, sigma)
    return replace(vector, **changes)


def crossover(
    a: ParameterVector,
    b: ParameterVector,
    rng: random.Random,
    mode: str = "uniform",
) -> ParameterVector:
    """
    Combine two parents field by field.

    uniform: each element copied from one parent with probability 0.5
    blend:   each element a random convex combination of both parents
    """
    check_shape(a, b)

    def pick(x: float, y: float) -> float:
        if mode == "blend":
            alpha = rng.random()
            return alpha * x + (1 - alpha) * y
        return x if rng.random() < 0.5 else y

    changes: Dict[str, Any] = {}
    for name in WEIGHT_FIELDS:
        changes[name] = tuple(pick(x, y) for x, y in zip(getattr(a, name), getattr(b, name)))
    for name in SCALAR_FIELDS:
        changes[name] = pick(getattr(a, name), getattr(b, name))
    return replace(a, **changes)


def mutate(
    vector: ParameterVector,
    rate: float,
    rng: random.Random,
    bounds: ParameterBounds = DEFAULT_BOUNDS,
) -> ParameterVector:
    """Re-draw each element with probability `rate` (Gaussian, clamped)."""

    def redraw(name: str, value: float) -> float:
        if rng.random() >= rate:
            return value
        bound = _bound_name(name)
        sigma = bounds.range_of(bound) * MUTATION_SIGMA
        return bounds.clamp(bound, value + rng.gauss(0.0, sigma))

    changes: Dict[str, Any] = {}
    for name in WEIGHT_FIELDS:
        changes[name] = tuple(redraw(name, w) for w in getattr(vector, name))
    for name in SCALAR_FIELDS:
        changes[name] = redraw(name, getattr(vector, name))
    return clamp_vector(replace(vector, **changes), bounds)


def random_vector(
    like: ParameterVector,
    bounds: ParameterBounds,
    rng: random.Random,
) -> ParameterVector:
    """Uniform random vector with the same shape as `like`."""
    changes: Dict[str, Any] = {}
    for name in WEIGHT_FIELDS:
        lo, hi = bounds.weight
        changes[name] = tuple(rng.uniform(lo, hi) for _ in getattr(like, name))
    for name in SCALAR_FIELDS:
        lo, hi = getattr(bounds, name)
        changes[name] = rng.uniform(lo, hi)
    return clamp_vector(replace(like, **changes), bounds)


# =============================================================================
# UNIT-CUBE VIEW
# =============================================================================

def to_unit_array(vector: ParameterVector, bounds: ParameterBounds = DEFAULT_BOUNDS) -> np.ndarray:
    """Normalize every element into [0, 1] by its bound range."""
    values: List[float] = []
    for name in WEIGHT_FIELDS:
        values.extend(bounds.normalize("weight", w) for w in getattr(vector, name))
    values.extend(bounds.normalize(name, getattr(vector, name)) for name in SCALAR_FIELDS)
    return np.clip(np.asarray(values, dtype=float), 0.0, 1.0)


def from_unit_array(
    array: np.ndarray,
    like: ParameterVector,
    bounds: ParameterBounds = DEFAULT_BOUNDS,
) -> ParameterVector:
    """Inverse of to_unit_array, shaped like `like`."""
    if len(array) != like.size:
        raise ShapeMismatchError("unit_array", like.size, len(array))

    unit = np.clip(np.asarray(array, dtype=float), 0.0, 1.0)
    changes: Dict[str, Any] = {}
    offset = 0
    for name in WEIGHT_FIELDS:
        n = len(getattr(like, name))
        changes[name] = tuple(
            bounds.denormalize("weight", float(u)) for u in unit[offset:offset + n]
        )
        offset += n
    for name in SCALAR_FIELDS:
        changes[name] = bounds.denormalize(name, float(unit[offset]))
        offset += 1
    return clamp_vector(replace(like, **changes), bounds)


def distance(
    a: ParameterVector,
    b: ParameterVector,
    bounds: ParameterBounds = DEFAULT_BOUNDS,
) -> float:
    """Root-mean-square of normalized per-element differences, in [0, 1]."""
    check_shape(a, b)
    diff = to_unit_array(a, bounds) - to_unit_array(b, bounds)
    if diff.size == 0:
        return 0.0
    return math.sqrt(float(np.mean(diff * diff)))
