"""
nameforge Core Module

Foundation layer shared by generation and optimization:
- Naming domain data model
- Parameter bounds
- Deterministic random streams
"""

from nameforge.core.domain import (
    PhonologyProfile,
    MorphologyProfile,
    StyleRules,
    NamingDomain,
    uniform_weights,
)
from nameforge.core.parameter_bounds import (
    ParameterBounds,
    DEFAULT_BOUNDS,
    BOUND_FIELDS,
)
from nameforge.core.rng import (
    create_rng,
    derive_seed,
    weighted_choice,
    chance,
)

__all__ = [
    "PhonologyProfile",
    "MorphologyProfile",
    "StyleRules",
    "NamingDomain",
    "uniform_weights",
    "ParameterBounds",
    "DEFAULT_BOUNDS",
    "BOUND_FIELDS",
    "create_rng",
    "derive_seed",
    "weighted_choice",
    "chance",
]
