"""
tests/unit/test_parameter_bounds.py - Tests for parameter bounds.
"""

import pytest

from nameforge.core.parameter_bounds import DEFAULT_BOUNDS, ParameterBounds
from nameforge.errors import ConfigurationError


class TestParameterBoundsValidation:
    """Tests for ParameterBounds.validate."""

    def test_defaults_valid(self):
        """Test default bounds pass validation."""
        DEFAULT_BOUNDS.validate()

    def test_inverted_range_rejected(self):
        """Test min > max is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            ParameterBounds(weight=(5.0, 1.0)).validate()
        assert exc_info.value.field == "bounds.weight"

    def test_empty_pair_rejected(self):
        """Test a bound must be a (min, max) pair."""
        with pytest.raises(ConfigurationError):
            ParameterBounds(hyphen_rate=()).validate()

    def test_length_window_impossible(self):
        """Test length_min cannot start above every allowed length_max."""
        with pytest.raises(ConfigurationError):
            ParameterBounds(length_min=(30.0, 40.0)).validate()


class TestParameterBoundsOps:
    """Tests for clamp / normalize / denormalize."""

    def test_clamp(self):
        assert DEFAULT_BOUNDS.clamp("apostrophe_rate", 0.9) == 0.5
        assert DEFAULT_BOUNDS.clamp("apostrophe_rate", -1.0) == 0.0
        assert DEFAULT_BOUNDS.clamp("weight", 3.0) == 3.0

    def test_range_of(self):
        assert DEFAULT_BOUNDS.range_of("length_max") == 16.0

    def test_normalize_denormalize(self):
        """Test normalize and denormalize are inverses."""
        unit = DEFAULT_BOUNDS.normalize("length_min", 6.0)
        assert unit == pytest.approx(0.5)
        assert DEFAULT_BOUNDS.denormalize("length_min", unit) == pytest.approx(6.0)

    def test_normalize_degenerate_range(self):
        """Test a zero-width range normalizes to 0."""
        bounds = ParameterBounds(hyphen_rate=(0.0, 0.0))
        assert bounds.normalize("hyphen_rate", 0.0) == 0.0

    def test_dict_roundtrip(self):
        bounds = ParameterBounds(weight=(0.1, 5.0))
        assert ParameterBounds.from_dict(bounds.to_dict()) == bounds
