"""
optimization/surrogate.py - Tree-structured Parzen estimator surrogate.

Observed parameter vectors (in the unit cube) are split by fitness into a
"good" set (top `gamma` fraction) and a "bad" set. Each set gets a Parzen
density: per dimension, an equal-weight Gaussian mixture centred on the
observations blended with a uniform prior over [0, 1]. Candidates are drawn
from the good density and ranked by log l(x) - log g(x); high values are
likely under good observations and unlikely under bad ones.
"""

from __future__ import annotations
from typing import Optional
import math
import random

import numpy as np


class ParzenSurrogate:
    """Good/bad density model over the unit cube."""

    def __init__(
        self,
        gamma: float = 0.25,
        min_bandwidth: float = 0.05,
        max_bandwidth: float = 0.5,
        prior_weight: float = 1.0,
    ):
        self.gamma = gamma
        self.min_bandwidth = min_bandwidth
        self.max_bandwidth = max_bandwidth
        self.prior_weight = prior_weight

        self.good: Optional[np.ndarray] = None
        self.bad: Optional[np.ndarray] = None
        self.good_bandwidth: Optional[np.ndarray] = None
        self.bad_bandwidth: Optional[np.ndarray] = None

    @property
    def is_fitted(self) -> bool:
        return self.good is not None

    def split_size(self, n: int) -> int:
        """Number of observations in the good set (at least one, leaving one bad)."""
        n_good = max(1, int(math.ceil(self.gamma * n)))
        return min(n_good, n - 1)

    def fit(self, X: np.ndarray, y: np.ndarray) -> "ParzenSurrogate":
        """
        Fit both densities.

        Args:
            X: Observations, shape (n, d), values in [0, 1]
            y: Fitness per observation, shape (n,)
        """
        X = np.asarray(X, dtype=float)
        y = np.asarray(y, dtype=float)
        if X.ndim != 2 or len(X) != len(y):
            raise ValueError("X must be (n, d) and match y")
        if len(y) < 2:
            raise ValueError("Need at least two observations to split good from bad")

        order = np.argsort(-y, kind="stable")
        n_good = self.split_size(len(y))

        self.good = X[order[:n_good]]
        self.bad = X[order[n_good:]]
        self.good_bandwidth = self._bandwidth(self.good)
        self.bad_bandwidth = self._bandwidth(self.bad)
        return self

    def _bandwidth(self, points: np.ndarray) -> np.ndarray:
        # Scott's rule per dimension
        n, d = points.shape
        if n < 2:
            return np.full(d, self.max_bandwidth)
        sigma = points.std(axis=0) * n ** (-1.0 / (d + 4))
        return np.clip(sigma, self.min_bandwidth, self.max_bandwidth)

    def _log_density(self, X: np.ndarray, centers: np.ndarray, bandwidth: np.ndarray) -> np.ndarray:
        z = (X[:, None, :] - centers[None, :, :]) / bandwidth[None, None, :]
        kernels = np.exp(-0.5 * z * z) / (math.sqrt(2 * math.pi) * bandwidth[None, None, :])
        per_dim = (kernels.sum(axis=1) + self.prior_weight) / (len(centers) + self.prior_weight)
        return np.log(per_dim).sum(axis=1)

    def score(self, X: np.ndarray) -> np.ndarray:
        """log l(x) - log g(x) for each row of X."""
        if not self.is_fitted:
            raise RuntimeError("Surrogate must be fitted before scoring")
        X = np.atleast_2d(np.asarray(X, dtype=float))
        return (
            self._log_density(X, self.good, self.good_bandwidth)
            - self._log_density(X, self.bad, self.bad_bandwidth)
        )

    def sample(self, n: int, rng: random.Random) -> np.ndarray:
        """Draw n candidates from the good density (including its uniform prior)."""
        if not self.is_fitted:
            raise RuntimeError("Surrogate must be fitted before sampling")

        k, d = self.good.shape
        prior_share = self.prior_weight / (k + self.prior_weight)
        samples = np.empty((n, d))
        for i in range(n):
            for j in range(d):
                if rng.random() < prior_share:
                    samples[i, j] = rng.random()
                else:
                    center = self.good[rng.randrange(k), j]
                    samples[i, j] = center + rng.gauss(0.0, float(self.good_bandwidth[j]))
        return np.clip(samples, 0.0, 1.0)
