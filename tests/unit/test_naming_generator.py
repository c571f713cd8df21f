"""
tests/unit/test_naming_generator.py - Tests for the reference name generator.
"""

from nameforge.core.domain import PhonologyProfile, StyleRules
from nameforge.core.rng import create_rng
from nameforge.naming.generator import (
    capitalize,
    generate_name,
    generate_sample,
    insert_markers,
    letter_count,
    syllable_boundaries,
)


class TestGenerateName:
    """Tests for generate_name."""

    def test_deterministic_for_seed(self, domain):
        a = generate_sample(domain, 20, create_rng("gen").random)
        b = generate_sample(domain, 20, create_rng("gen").random)
        assert a == b

    def test_never_longer_than_max(self, domain_factory):
        domain = domain_factory(length_min=3, length_max=6)
        rng = create_rng("length")
        for _ in range(100):
            assert letter_count(generate_name(domain, rng.random)) <= 6

    def test_title_case(self, domain):
        rng = create_rng("title")
        for _ in range(20):
            name = generate_name(domain, rng.random)
            assert name[0].isupper()

    def test_no_markers_when_rates_zero(self, domain):
        rng = create_rng("markers")
        names = generate_sample(domain, 50, rng.random)
        assert not any("'" in n or "-" in n for n in names)

    def test_favored_clusters_used(self, domain_factory):
        domain = domain_factory()
        clustered = domain.with_changes(
            phonology=PhonologyProfile(
                consonants=domain.phonology.consonants,
                vowels=domain.phonology.vowels,
                favored_clusters=("zq",),
            )
        )
        names = generate_sample(clustered, 200, create_rng("clusters").random)
        assert any("zq" in n.lower() for n in names)


class TestMarkers:
    """Tests for marker insertion helpers."""

    def test_syllable_boundaries(self):
        assert syllable_boundaries(["ka", "lor", "in"]) == [2, 5]

    def test_insert_apostrophe(self):
        style = StyleRules(apostrophe_rate=1.0)
        assert insert_markers(lambda: 0.0, "kalor", ["ka", "lor"], style) == "ka'lor"

    def test_single_segment_unchanged(self):
        style = StyleRules(apostrophe_rate=1.0, hyphen_rate=1.0)
        assert insert_markers(lambda: 0.0, "kal", ["kal"], style) == "kal"


class TestCapitalize:
    """Tests for capitalize."""

    def test_title_each_hyphen_part(self):
        assert capitalize("ka-lor", "title") == "Ka-Lor"

    def test_upper_lower(self):
        assert capitalize("Kal", "upper") == "KAL"
        assert capitalize("Kal", "lower") == "kal"
