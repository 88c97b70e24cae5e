"""Tests for shamir256.polynomial module."""

from __future__ import annotations

import pytest

from shamir256 import gf256
from shamir256.errors import (
    InvalidArgument,
    InvalidElement,
    InvalidSecret,
    InvalidThreshold,
    ThresholdExceedsField,
)
from shamir256.polynomial import (
    MAX_EVALUATION_POINTS,
    PolynomialGenerator,
    polynomial_degree,
    validate_polynomial,
)
from shamir256.secure_random import SecureRandom


class TestGeneratePolynomial:
    @pytest.fixture
    def gen(self, rng: SecureRandom) -> PolynomialGenerator:
        return PolynomialGenerator(rng)

    def test_degree_invariant(self, gen: PolynomialGenerator):
        for _ in range(1000):
            coeffs = gen.generate_polynomial(secret=5, threshold=4)
            assert len(coeffs) == 4
            assert coeffs[0] == 5
            assert coeffs[3] != 0
            assert validate_polynomial(coeffs)

    def test_threshold_two(self, gen: PolynomialGenerator):
        coeffs = gen.generate_polynomial(secret=0, threshold=2)
        assert len(coeffs) == 2
        assert coeffs[0] == 0
        assert coeffs[1] != 0

    def test_max_threshold(self, gen: PolynomialGenerator):
        coeffs = gen.generate_polynomial(secret=255, threshold=256)
        assert len(coeffs) == 256
        assert polynomial_degree(coeffs) == 255

    def test_threshold_too_small(self, gen: PolynomialGenerator):
        with pytest.raises(InvalidThreshold, match="at least 2"):
            gen.generate_polynomial(secret=1, threshold=1)

    def test_threshold_exceeds_field(self, gen: PolynomialGenerator):
        with pytest.raises(ThresholdExceedsField):
            gen.generate_polynomial(secret=1, threshold=257)
        with pytest.raises(ThresholdExceedsField):
            gen.generate_polynomial(secret=1, threshold=5, field_size=4)

    @pytest.mark.parametrize("secret", [-1, 256])
    def test_invalid_secret(self, gen: PolynomialGenerator, secret: int):
        with pytest.raises(InvalidSecret):
            gen.generate_polynomial(secret=secret, threshold=3)

    def test_errors_are_invalid_arguments(self, gen: PolynomialGenerator):
        with pytest.raises(InvalidArgument):
            gen.generate_polynomial(secret=1, threshold=0)

    def test_coefficients_vary(self, gen: PolynomialGenerator):
        polys = {tuple(gen.generate_polynomial(secret=9, threshold=5)) for _ in range(20)}
        assert len(polys) == 20


class TestMultiplePolynomials:
    def test_one_per_secret(self, rng: SecureRandom):
        gen = PolynomialGenerator(rng)
        polys = gen.generate_multiple_polynomials([1, 2, 3], threshold=3)
        assert [p[0] for p in polys] == [1, 2, 3]
        assert all(len(p) == 3 for p in polys)

    def test_byte_array(self, rng: SecureRandom):
        gen = PolynomialGenerator(rng)
        polys = gen.generate_for_byte_array(b"\x00\xff\x7a", threshold=2)
        assert [p[0] for p in polys] == [0x00, 0xFF, 0x7A]

    def test_identical_bytes_get_independent_polynomials(self, rng: SecureRandom):
        gen = PolynomialGenerator(rng)
        polys = gen.generate_for_byte_array(bytes(16), threshold=4)
        assert len({tuple(p) for p in polys}) == 16

    def test_empty(self, rng: SecureRandom):
        gen = PolynomialGenerator(rng)
        with pytest.raises(InvalidArgument, match="empty"):
            gen.generate_multiple_polynomials([], threshold=2)
        with pytest.raises(InvalidArgument, match="empty"):
            gen.generate_for_byte_array(b"", threshold=2)


class TestEvaluationPoints:
    def test_distinct_nonzero_sorted(self, rng: SecureRandom):
        points = PolynomialGenerator(rng).generate_evaluation_points(10)
        assert len(points) == 10
        assert len(set(points)) == 10
        assert 0 not in points
        assert points == sorted(points)

    def test_all_points(self, rng: SecureRandom):
        points = PolynomialGenerator(rng).generate_evaluation_points(MAX_EVALUATION_POINTS)
        assert points == list(range(1, 256))

    @pytest.mark.parametrize("n", [0, 256])
    def test_out_of_range(self, rng: SecureRandom, n: int):
        with pytest.raises(InvalidArgument):
            PolynomialGenerator(rng).generate_evaluation_points(n)

    def test_sequential(self):
        assert PolynomialGenerator.sequential_evaluation_points(4) == [1, 2, 3, 4]
        with pytest.raises(InvalidArgument):
            PolynomialGenerator.sequential_evaluation_points(0)


class TestHelpers:
    def test_evaluate_delegates_to_field(self):
        coeffs = [7, 3, 1]
        assert PolynomialGenerator.evaluate_polynomial(coeffs, 9) == gf256.evaluate_polynomial(
            coeffs, 9
        )

    def test_evaluate_rejects_bad_x(self):
        with pytest.raises(InvalidElement):
            PolynomialGenerator.evaluate_polynomial([1, 2], 300)

    def test_validate(self):
        assert validate_polynomial([7])
        assert validate_polynomial([0])
        assert validate_polynomial([1, 2, 3])
        assert not validate_polynomial([])
        assert not validate_polynomial([1, 2, 0])
        assert not validate_polynomial([1, 256])

    def test_degree(self):
        assert polynomial_degree([]) == -1
        assert polynomial_degree([0, 0, 0]) == 0
        assert polynomial_degree([4]) == 0
        assert polynomial_degree([1, 2, 0]) == 1
        assert polynomial_degree([1, 0, 0, 9]) == 3

    def test_default_rng(self):
        assert PolynomialGenerator().rng is SecureRandom.default()
