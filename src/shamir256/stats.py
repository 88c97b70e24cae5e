"""Statistical checks on random output: frequencies, chi-square, entropy.

Used to confirm that SecureRandom's rejection sampling leaves no modulo
bias and that a source's byte output looks uniform.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from scipy.stats import chisquare

from shamir256.errors import InvalidArgument
from shamir256.secure_random import SecureRandom


def frequency_counts(samples: Sequence[int] | np.ndarray, categories: int) -> np.ndarray:
    """Occurrences of each value 0..categories-1 in samples."""
    if categories < 1:
        raise InvalidArgument(f"categories must be positive, got {categories}")
    arr = np.asarray(samples, dtype=np.int64)
    if arr.size and (arr.min() < 0 or arr.max() >= categories):
        raise InvalidArgument(f"Samples must lie in [0, {categories})")
    return np.bincount(arr, minlength=categories)


@dataclass(frozen=True)
class UniformityResult:
    """Pearson chi-square test of samples against the uniform distribution."""

    statistic: float
    p_value: float
    counts: np.ndarray

    def is_uniform(self, alpha: float = 1e-3) -> bool:
        """True unless uniformity is rejected at significance alpha."""
        return self.p_value >= alpha


def chi_square_uniformity(
    samples: Sequence[int] | np.ndarray,
    categories: int,
) -> UniformityResult:
    if len(samples) == 0:
        raise InvalidArgument("Need at least one sample")
    counts = frequency_counts(samples, categories)
    statistic, p_value = chisquare(counts)
    return UniformityResult(statistic=float(statistic), p_value=float(p_value), counts=counts)


def shannon_entropy(samples: Sequence[int] | np.ndarray, categories: int = 256) -> float:
    """Empirical entropy in bits per sample; log2(categories) at most."""
    counts = frequency_counts(samples, categories)
    total = counts.sum()
    if total == 0:
        return 0.0
    p = counts[counts > 0] / total
    return float(-np.sum(p * np.log2(p)))


@dataclass(frozen=True)
class RandomnessReport:
    """Summary of a draw from a SecureRandom.

    Attributes:
        n_samples: Number of values drawn.
        categories: Values were drawn from [0, categories).
        chi_square: Chi-square statistic against uniform.
        p_value: Its p-value.
        entropy_bits: Empirical entropy per sample.
        max_entropy_bits: log2(categories).
        passed: Whether uniformity survived the test at the chosen alpha.
    """

    n_samples: int
    categories: int
    chi_square: float
    p_value: float
    entropy_bits: float
    max_entropy_bits: float
    passed: bool


def assess_random_source(
    rng: SecureRandom,
    n_samples: int = 60_000,
    categories: int = 256,
    alpha: float = 1e-3,
) -> RandomnessReport:
    """Draw n_samples values with rng.next_int(categories) and test them."""
    if n_samples < 1:
        raise InvalidArgument(f"n_samples must be positive, got {n_samples}")
    if not 0.0 < alpha < 1.0:
        raise InvalidArgument(f"alpha must be in (0, 1), got {alpha}")

    samples = np.fromiter(
        (rng.next_int(categories) for _ in range(n_samples)),
        dtype=np.int64,
        count=n_samples,
    )
    uniformity = chi_square_uniformity(samples, categories)
    return RandomnessReport(
        n_samples=n_samples,
        categories=categories,
        chi_square=uniformity.statistic,
        p_value=uniformity.p_value,
        entropy_bits=shannon_entropy(samples, categories),
        max_entropy_bits=float(np.log2(categories)),
        passed=uniformity.is_uniform(alpha),
    )
