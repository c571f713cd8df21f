"""
tests/unit/test_naming_metrics.py - Tests for the reference validation metrics.
"""

import pytest

from nameforge.core.rng import create_rng
from nameforge.naming.generator import generate_sample
from nameforge.naming.metrics import (
    SCORE_KEYS,
    capacity_score,
    edit_distance,
    length_score,
    normalized_edit_distance,
    pronounceability_score,
    score_sample,
    separation_score,
    shape_of,
    style_score,
    total_variation,
)
from nameforge.optimization.schema import ValidationSettings


class TestDistances:
    """Tests for string distance helpers."""

    def test_edit_distance(self):
        assert edit_distance("kitten", "sitting") == 3
        assert edit_distance("", "abc") == 3

    def test_normalized_edit_distance(self):
        assert normalized_edit_distance("", "") == 0.0
        assert normalized_edit_distance("abcd", "abcf") == pytest.approx(0.25)

    def test_shape_of(self):
        assert shape_of("Kaldor") == "CVCCVC"

    def test_total_variation(self):
        assert total_variation({"a": 1.0}, {"b": 1.0}) == pytest.approx(1.0)
        assert total_variation({"a": 0.5, "b": 0.5}, {"a": 0.5, "b": 0.5}) == 0.0


class TestSubScores:
    """Tests for individual sub-scores."""

    def test_capacity_zero_for_identical_names(self):
        assert capacity_score(["aaa"] * 10) == 0.0

    def test_separation_zero_without_siblings(self):
        assert separation_score(["kalor"], [], ValidationSettings()) == 0.0

    def test_separation_positive_for_different_siblings(self):
        score = separation_score(["kalor", "melin"], [["grukk", "zug"]], ValidationSettings())
        assert score > 0.0

    def test_length_score(self):
        settings = ValidationSettings(target_length_min=4, target_length_max=12)
        assert length_score(["abcd", "ab"], settings) == 0.5

    def test_style_score(self):
        assert style_score(["Ka'lor", "'Kal", "Ka--l"]) == pytest.approx(1 / 3)

    def test_pronounceability(self):
        assert pronounceability_score(["Kalor"]) == 1.0
        assert pronounceability_score(["Kalor", "Strk"]) == 0.5


class TestScoreSample:
    """Tests for score_sample."""

    def test_all_keys_in_unit_range(self, domain, sibling_domains):
        settings = ValidationSettings(sample_size=30, max_pairwise_sample=30)
        names = generate_sample(domain, 30, create_rng("metrics").random)
        siblings = [generate_sample(d, 15, create_rng(d.id).random) for d in sibling_domains]

        scores = score_sample(names, siblings, settings)

        assert set(scores) == set(SCORE_KEYS)
        for value in scores.values():
            assert 0.0 <= value <= 1.0

    def test_empty_sample(self):
        scores = score_sample([], [], ValidationSettings())
        assert all(v == 0.0 for v in scores.values())
