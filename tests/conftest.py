"""
nameforge test configuration and fixtures.

Besides sample domains, this provides two cheap deterministic collaborators:

- param_generator encodes a domain's first consonant weight and its marker
  rates into the "name" it returns.
- param_scorer decodes them again and turns them into sub-scores, so fitness
  is a smooth function of the parameters (up with the first consonant
  weight, down with the marker rates).

Strategies can be exercised in milliseconds with them; the real generator and
metrics are used by the integration tests.
"""

import pytest

from nameforge.bootstrap.config import OptimizerConfig
from nameforge.core.domain import MorphologyProfile, NamingDomain, PhonologyProfile, StyleRules
from nameforge.optimization.schema import ValidationSettings


def build_domain(
    domain_id="elvish",
    consonants=("s", "l", "r", "th", "n", "t", "k"),
    vowels=("a", "e", "i", "o"),
    **style,
):
    return NamingDomain(
        id=domain_id,
        phonology=PhonologyProfile(
            consonants=tuple(consonants),
            vowels=tuple(vowels),
            syllable_templates=("CV", "CVC", "V"),
        ),
        morphology=MorphologyProfile(
            prefixes=("el",),
            suffixes=("ion", "ar"),
            structures=("root", "root-suffix", "prefix-root"),
        ),
        style=StyleRules(**style),
    )


def param_generator(domain, rng):
    rng()
    return "{:.6f}|{:.6f}|{:.6f}".format(
        domain.phonology.consonant_weights[0],
        domain.style.apostrophe_rate,
        domain.style.hyphen_rate,
    )


def param_scorer(names, sibling_samples, settings):
    weight, apostrophe, hyphen = (float(x) for x in names[0].split("|"))
    return {
        "capacity": min(1.0, weight / 10.0),
        "diffuseness": 0.5,
        "separation": 0.9 if sibling_samples else 0.0,
        "pronounceability": 1.0 - 2 * apostrophe,
        "length": 0.5,
        "style": 1.0 - 2 * hyphen,
    }


def constant_scorer(names, sibling_samples, settings):
    return {
        "capacity": 0.5,
        "diffuseness": 0.5,
        "separation": 0.5,
        "pronounceability": 0.5,
        "length": 0.5,
        "style": 0.5,
    }


@pytest.fixture
def domain():
    """Elvish-like domain with uniform weights."""
    return build_domain()


@pytest.fixture
def domain_factory():
    """build_domain(domain_id, consonants, vowels, **style)."""
    return build_domain


@pytest.fixture
def sibling_domains():
    """Two peers with clearly different inventories."""
    return [
        build_domain("dwarvish", consonants=("d", "g", "r", "k", "b", "m"), vowels=("a", "u", "o")),
        build_domain("orcish", consonants=("g", "z", "k", "r", "sh"), vowels=("u", "a")),
    ]


@pytest.fixture
def small_validation():
    """Validation settings small enough for the real metrics to be fast."""
    return ValidationSettings(sample_size=16, max_pairwise_sample=16)


@pytest.fixture
def config():
    """Process defaults independent of the environment."""
    return OptimizerConfig(workers=1)


@pytest.fixture
def stub_generator():
    return param_generator


@pytest.fixture
def stub_scorer():
    return param_scorer


@pytest.fixture
def flat_scorer():
    return constant_scorer
