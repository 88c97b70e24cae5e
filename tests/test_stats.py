"""Tests for shamir256.stats module."""

from __future__ import annotations

import numpy as np
import pytest

from shamir256.errors import InvalidArgument
from shamir256.secure_random import SecureRandom
from shamir256.stats import (
    assess_random_source,
    chi_square_uniformity,
    frequency_counts,
    shannon_entropy,
)


class TestFrequencyCounts:
    def test_counts(self):
        counts = frequency_counts([0, 1, 1, 3], categories=5)
        np.testing.assert_array_equal(counts, [1, 2, 0, 1, 0])

    def test_out_of_range(self):
        with pytest.raises(InvalidArgument, match="Samples"):
            frequency_counts([0, 5], categories=5)
        with pytest.raises(InvalidArgument):
            frequency_counts([-1], categories=5)

    def test_invalid_categories(self):
        with pytest.raises(InvalidArgument):
            frequency_counts([0], categories=0)


class TestChiSquare:
    def test_perfectly_uniform(self):
        samples = list(range(6)) * 100
        result = chi_square_uniformity(samples, categories=6)
        assert result.statistic == 0.0
        assert result.p_value == pytest.approx(1.0)
        assert result.is_uniform()

    def test_biased(self):
        samples = [0] * 500 + [1] * 100
        result = chi_square_uniformity(samples, categories=2)
        assert result.p_value < 1e-6
        assert not result.is_uniform()

    def test_modulo_bias_is_visible(self):
        """Reducing bytes mod 6 without rejection favours 0..3."""
        samples = np.arange(256 * 2000) % 256 % 6
        assert not chi_square_uniformity(samples, categories=6).is_uniform()

    def test_empty(self):
        with pytest.raises(InvalidArgument):
            chi_square_uniformity([], categories=6)


class TestEntropy:
    def test_uniform_bytes(self):
        assert shannon_entropy(np.arange(256 * 4) % 256) == pytest.approx(8.0)

    def test_constant(self):
        assert shannon_entropy([7] * 100) == pytest.approx(0.0)

    def test_empty(self):
        assert shannon_entropy([]) == 0.0


class TestAssessRandomSource:
    def test_next_int_six(self):
        report = assess_random_source(
            SecureRandom.seeded(42), n_samples=60_000, categories=6, alpha=1e-6
        )
        assert report.passed
        assert report.n_samples == 60_000
        assert report.entropy_bits == pytest.approx(np.log2(6), abs=0.01)

    def test_bytes(self):
        report = assess_random_source(SecureRandom.seeded(8), n_samples=20_000, alpha=1e-6)
        assert report.passed
        assert report.max_entropy_bits == 8.0
        assert report.entropy_bits > 7.9

    def test_invalid_arguments(self):
        rng = SecureRandom.seeded(1)
        with pytest.raises(InvalidArgument):
            assess_random_source(rng, n_samples=0)
        with pytest.raises(InvalidArgument):
            assess_random_source(rng, n_samples=10, alpha=1.5)
