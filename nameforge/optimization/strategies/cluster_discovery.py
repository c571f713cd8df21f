"""
optimization/strategies/cluster_discovery.py - Corpus-driven domain seeding.

Not a local search. Consonant clusters that recur in a corpus of the
domain's own names (or a caller-supplied corpus), and clusters that are
frequent in sibling domains, are turned into favored clusters of the domain;
the weights of the consonants they use are boosted. Pattern-based clusters
(stop + liquid, s + stop, ...) built from the domain's own consonants are
offered as low-confidence extras. The seeded domain is then optionally
fine-tuned by hill-climbing.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Sequence, Set, Tuple
import random
import time

from nameforge.core.domain import NamingDomain
from nameforge.core.parameter_bounds import DEFAULT_BOUNDS, ParameterBounds
from nameforge.core.rng import create_rng, derive_seed

from ..enums import ClusterSource, Confidence
from ..schema import OptimizationResult
from .base import RunContext, Strategy
from .hill_climb import hill_climb_from

# Share of corpus names a cluster must appear in
HIGH_CONFIDENCE_SHARE = 0.167
MEDIUM_CONFIDENCE_SHARE = 0.067

CLUSTER_WEIGHT_BOOST = 1.25

# Sibling borrowing: clusters considered per sibling, clusters borrowed
BORROW_TOP_CLUSTERS = 20
MAX_BORROWED = 3

CLUSTER_PATTERNS = (
    (("p", "b", "t", "d", "k", "g"), ("l", "r")),    # stop + liquid
    (("s",), ("p", "t", "k")),                        # s + stop
    (("m", "n"), ("b", "d", "g", "p", "t", "k")),     # nasal + stop
    (("f", "v", "th", "s"), ("l", "r", "w")),         # fricative + approximant
)

_CONFIDENCE_ORDER = {Confidence.HIGH: 0, Confidence.MEDIUM: 1, Confidence.LOW: 2}


@dataclass
class ClusterStats:
    cluster: str
    frequency: int = 0
    positions: Set[str] = field(default_factory=set)


@dataclass(frozen=True)
class ClusterSuggestion:
    cluster: str
    source: ClusterSource
    confidence: Confidence
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cluster": self.cluster,
            "source": self.source.value,
            "confidence": self.confidence.value,
            "reason": self.reason,
        }


def consonant_letters(domain: NamingDomain) -> Set[str]:
    letters: Set[str] = set()
    for consonant in domain.phonology.consonants:
        letters.update(consonant.lower())
    return letters


def extract_clusters(name: str, consonants: Set[str]) -> List[str]:
    """Runs of two or more consonant letters."""
    clusters = []
    current = ""
    for char in name.lower():
        if char in consonants:
            current += char
        else:
            if len(current) >= 2:
                clusters.append(current)
            current = ""
    if len(current) >= 2:
        clusters.append(current)
    return clusters


def analyze_cluster_usage(names: Sequence[str], domain: NamingDomain) -> List[ClusterStats]:
    """Cluster frequencies and positions, most frequent first."""
    consonants = consonant_letters(domain)
    stats: Dict[str, ClusterStats] = {}

    for name in names:
        lowered = name.lower()
        for cluster in extract_clusters(name, consonants):
            entry = stats.setdefault(cluster, ClusterStats(cluster))
            entry.frequency += 1

            idx = lowered.find(cluster)
            if idx == 0:
                entry.positions.add("onset")
            elif idx + len(cluster) == len(lowered):
                entry.positions.add("coda")
            else:
                entry.positions.add("medial")

    return sorted(stats.values(), key=lambda s: (-s.frequency, s.cluster))


def synthesize_clusters(domain: NamingDomain, count: int, rng: random.Random) -> List[str]:
    """Phonotactically plausible clusters the domain's consonants can form."""
    consonants = set(domain.phonology.consonants)
    if len(consonants) < 2:
        return []

    existing = set(domain.phonology.favored_clusters)
    clusters: List[str] = []
    for firsts, seconds in CLUSTER_PATTERNS:
        for first in firsts:
            if first not in consonants:
                continue
            for second in seconds:
                if second not in consonants:
                    continue
                cluster = first + second
                if cluster not in existing and cluster not in clusters:
                    clusters.append(cluster)

    rng.shuffle(clusters)
    return clusters[:count]


def _confidence(frequency: int, corpus_size: int) -> Confidence:
    share = frequency / corpus_size if corpus_size else 0.0
    if share > HIGH_CONFIDENCE_SHARE:
        return Confidence.HIGH
    if share > MEDIUM_CONFIDENCE_SHARE:
        return Confidence.MEDIUM
    return Confidence.LOW


def borrow_clusters_from_siblings(
    domain: NamingDomain,
    sibling_corpora: Sequence[Tuple[NamingDomain, Sequence[str]]],
    max_borrow: int = MAX_BORROWED,
) -> List[str]:
    """
    Clusters frequent in sibling domains that `domain` can also form.

    Each sibling's names are analyzed with that sibling's consonants; the top
    BORROW_TOP_CLUSTERS of every sibling are pooled by total frequency.
    """
    totals: Dict[str, int] = {}
    for sibling, names in sibling_corpora:
        for stats in analyze_cluster_usage(names, sibling)[:BORROW_TOP_CLUSTERS]:
            totals[stats.cluster] = totals.get(stats.cluster, 0) + stats.frequency

    existing = set(domain.phonology.favored_clusters)
    letters = consonant_letters(domain)
    candidates = sorted(
        (c for c in totals if c not in existing and set(c) <= letters),
        key=lambda c: (-totals[c], c),
    )
    return candidates[:max_borrow]


def suggest_clusters(
    domain: NamingDomain,
    corpus: Sequence[str],
    rng: random.Random,
    max_suggestions: int = 5,
    sibling_corpora: Sequence[Tuple[NamingDomain, Sequence[str]]] = (),
) -> List[ClusterSuggestion]:
    """
    Discovered clusters (graded by frequency), then clusters borrowed from
    siblings (medium confidence), then synthesized ones (low confidence).
    """
    existing = set(domain.phonology.favored_clusters)
    letters = consonant_letters(domain)
    suggestions: List[ClusterSuggestion] = []

    discovered = [
        s for s in analyze_cluster_usage(corpus, domain)
        if s.cluster not in existing and set(s.cluster) <= letters
    ]
    for stats in discovered[:max_suggestions]:
        suggestions.append(ClusterSuggestion(
            cluster=stats.cluster,
            source=ClusterSource.DISCOVERED,
            confidence=_confidence(stats.frequency, len(corpus)),
            reason=f"Appears {stats.frequency} times in {len(corpus)} corpus names",
        ))

    taken = {s.cluster for s in suggestions}
    if sibling_corpora:
        borrowed = borrow_clusters_from_siblings(
            domain, sibling_corpora, min(MAX_BORROWED, max_suggestions)
        )
        for cluster in borrowed:
            if cluster not in taken:
                taken.add(cluster)
                suggestions.append(ClusterSuggestion(
                    cluster=cluster,
                    source=ClusterSource.BORROWED,
                    confidence=Confidence.MEDIUM,
                    reason="Frequent in sibling domains",
                ))

    for cluster in synthesize_clusters(domain, max_suggestions, rng):
        if cluster not in taken:
            suggestions.append(ClusterSuggestion(
                cluster=cluster,
                source=ClusterSource.SYNTHESIZED,
                confidence=Confidence.LOW,
                reason="Follows common phonotactic patterns",
            ))

    return suggestions


def select_suggestions(suggestions: Sequence[ClusterSuggestion], limit: int = 5) -> List[ClusterSuggestion]:
    """Suggestions worth applying: anything above low confidence, best first."""
    ranked = sorted(suggestions, key=lambda s: _CONFIDENCE_ORDER[s.confidence])
    return [s for s in ranked if s.confidence != Confidence.LOW][:limit]


def apply_cluster_suggestions(
    domain: NamingDomain,
    suggestions: Sequence[ClusterSuggestion],
    max_apply: int = 5,
    bounds: ParameterBounds = DEFAULT_BOUNDS,
) -> NamingDomain:
    """
    Add clusters to favored_clusters and boost the consonants they use.

    Returns:
        New domain; the input is not modified
    """
    ranked = sorted(suggestions, key=lambda s: _CONFIDENCE_ORDER[s.confidence])[:max_apply]
    existing = list(domain.phonology.favored_clusters)
    added = [s.cluster for s in ranked if s.cluster not in existing]
    if not added:
        return domain

    weights = tuple(
        bounds.clamp("weight", w * CLUSTER_WEIGHT_BOOST) if any(c in cluster for cluster in added) else w
        for c, w in zip(domain.phonology.consonants, domain.phonology.consonant_weights)
    )
    phonology = replace(
        domain.phonology,
        favored_clusters=tuple(existing + added),
        consonant_weights=weights,
    )
    return domain.with_changes(phonology=phonology)


@dataclass
class SeedingPlan:
    """Outcome of one seeding pass."""
    domain: NamingDomain
    suggestions: List[ClusterSuggestion]
    applied: List[ClusterSuggestion]


def plan_seeding(
    domain: NamingDomain,
    corpus: Sequence[str],
    sibling_corpora: Sequence[Tuple[NamingDomain, Sequence[str]]] = (),
    max_suggestions: int = 5,
    bounds: ParameterBounds = DEFAULT_BOUNDS,
) -> SeedingPlan:
    """Suggest clusters for `domain` and apply the ones above low confidence."""
    rng = create_rng(derive_seed("cluster", domain.id))
    suggestions = suggest_clusters(domain, corpus, rng, max_suggestions, sibling_corpora)
    applied = select_suggestions(suggestions, max_suggestions)
    seeded = apply_cluster_suggestions(domain, applied, max_suggestions, bounds)
    return SeedingPlan(domain=seeded, suggestions=suggestions, applied=applied)


def seed_domain(
    domain: NamingDomain,
    corpus: Sequence[str],
    max_suggestions: int = 5,
    bounds: ParameterBounds = DEFAULT_BOUNDS,
    sibling_corpora: Sequence[Tuple[NamingDomain, Sequence[str]]] = (),
) -> NamingDomain:
    """Deterministic one-shot seeding of `domain` from a corpus."""
    return plan_seeding(domain, corpus, sibling_corpora, max_suggestions, bounds).domain


class ClusterDiscoveryStrategy(Strategy):
    """Seed from a corpus, then optionally fine-tune with hill-climbing."""

    name = "cluster"

    def run(self, context: RunContext) -> OptimizationResult:
        started = time.time()
        settings = context.settings
        domain = context.initial_domain

        initial = self.evaluate_initial(context)
        state = self.start_run(context, initial)

        size = settings.corpus_sample_size
        corpus = list(context.corpus) if context.corpus is not None else self.build_corpus(context, domain, size)
        sibling_corpora = [
            (sibling, self.build_corpus(context, sibling, size))
            for sibling in context.evaluator.sibling_domains
        ]

        plan = plan_seeding(
            domain, corpus, sibling_corpora, settings.max_cluster_suggestions, context.bounds
        )
        for s in plan.suggestions:
            self.log(context, f"[{s.confidence.value}] '{s.cluster}' ({s.source.value}): {s.reason}")

        seeded_context = replace(context, initial_domain=plan.domain, pool=None)
        seeded = self.evaluate_initial(seeded_context)
        state.record(seeded)
        state.current = seeded
        self.log(
            context,
            f"applied {len(plan.applied)} clusters: {', '.join(s.cluster for s in plan.applied) or '-'} "
            f"(fitness {initial.fitness:.4f} -> {seeded.fitness:.4f})",
        )
        self.finish_iteration(context, state)

        if settings.fine_tune and not self.check_cancelled(context, state):
            hill_climb_from(seeded_context, state, seeded)

        state.diagnostics.update({
            "corpus_size": len(corpus),
            "sibling_corpus_sizes": {s.id: len(names) for s, names in sibling_corpora},
            "suggestions": [s.to_dict() for s in plan.suggestions],
            "applied_clusters": [s.cluster for s in plan.applied],
            "seeded_fitness": seeded.fitness,
            "fine_tuned": settings.fine_tune,
        })
        return self.build_result(context, state, started)

    def build_corpus(self, context: RunContext, source: NamingDomain, size: int) -> List[str]:
        """`size` names generated from `source` on a run-seeded stream."""
        rng = create_rng(derive_seed(context.seed, "corpus", source.id))
        return [context.evaluator.generator(source, rng.random) for _ in range(size)]
