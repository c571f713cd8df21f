"""
tests/unit/test_core_domain.py - Tests for the naming domain data model.
"""

import pytest

from nameforge.core.domain import (
    MorphologyProfile,
    NamingDomain,
    PhonologyProfile,
    StyleRules,
    uniform_weights,
)


class TestPhonologyProfile:
    """Tests for PhonologyProfile."""

    def test_missing_weights_default_to_uniform(self):
        """Test weights default to 1.0 per inventory item."""
        profile = PhonologyProfile(consonants=("k", "l", "r"), vowels=("a", "e"))

        assert profile.consonant_weights == (1.0, 1.0, 1.0)
        assert profile.vowel_weights == (1.0, 1.0)
        assert profile.template_weights == (1.0, 1.0, 1.0)

    def test_mismatched_weights_rejected(self):
        """Test weight count must match inventory."""
        with pytest.raises(ValueError):
            PhonologyProfile(consonants=("k", "l"), vowels=("a",), consonant_weights=(1.0,))

    def test_is_frozen(self):
        """Test profiles cannot be mutated."""
        profile = PhonologyProfile(consonants=("k",), vowels=("a",))
        with pytest.raises(Exception):
            profile.consonants = ("x",)


class TestMorphologyProfile:
    """Tests for MorphologyProfile."""

    def test_default_structure(self):
        """Test default is a bare root with uniform weight."""
        profile = MorphologyProfile()
        assert profile.structures == ("root",)
        assert profile.structure_weights == (1.0,)

    def test_mismatched_structure_weights_rejected(self):
        """Test structure weights must match structures."""
        with pytest.raises(ValueError):
            MorphologyProfile(structures=("root", "root-suffix"), structure_weights=(1.0,))


class TestNamingDomain:
    """Tests for NamingDomain."""

    def test_dict_roundtrip(self, domain):
        """Test to_dict/from_dict preserve the domain."""
        assert NamingDomain.from_dict(domain.to_dict()) == domain

    def test_from_dict_defaults(self):
        """Test missing sections fall back to defaults."""
        restored = NamingDomain.from_dict({
            "id": "minimal",
            "phonology": {"consonants": ["k"], "vowels": ["a"]},
        })
        assert restored.morphology == MorphologyProfile()
        assert restored.style == StyleRules()

    def test_with_changes_returns_copy(self, domain):
        """Test with_changes leaves the original untouched."""
        style = StyleRules(apostrophe_rate=0.2)
        changed = domain.with_changes(style=style)

        assert changed.style.apostrophe_rate == 0.2
        assert domain.style.apostrophe_rate == 0.0
        assert changed.phonology is domain.phonology
        assert changed.id == domain.id


class TestUniformWeights:
    """Tests for uniform_weights helper."""

    def test_value(self):
        assert uniform_weights(["a", "b"], 2) == (2.0, 2.0)

    def test_empty(self):
        assert uniform_weights([]) == ()
