"""Random polynomials and evaluation points for share generation.

f(x) = secret + a_1*x + ... + a_d*x^d over GF(256), with d = threshold - 1
and a_d != 0 so the polynomial has exactly the degree the threshold needs.
"""

from __future__ import annotations

from collections.abc import Sequence

from shamir256 import gf256
from shamir256.errors import (
    InvalidArgument,
    InvalidElement,
    InvalidSecret,
    InvalidThreshold,
    ThresholdExceedsField,
)
from shamir256.secure_random import SecureRandom

MAX_EVALUATION_POINTS = gf256.FIELD_SIZE - 1  # x = 0 is reserved for the secret


class PolynomialGenerator:
    """Draws polynomial coefficients and evaluation points.

    Args:
        rng: Randomness source. Defaults to the process-wide SecureRandom.
    """

    def __init__(self, rng: SecureRandom | None = None) -> None:
        self.rng = rng if rng is not None else SecureRandom.default()

    def generate_polynomial(
        self,
        secret: int,
        threshold: int,
        field_size: int = gf256.FIELD_SIZE,
    ) -> list[int]:
        """Coefficients [secret, a_1, ..., a_{threshold-1}] with a non-zero top term."""
        if threshold < 2:
            raise InvalidThreshold(f"Threshold must be at least 2, got {threshold}")
        if threshold > field_size:
            raise ThresholdExceedsField(
                f"Threshold {threshold} exceeds field size {field_size}"
            )
        if not gf256.is_valid_element(secret):
            raise InvalidSecret(f"Secret must be a GF(256) element (0-255), got {secret!r}")

        degree = threshold - 1
        coeffs = [secret]
        coeffs.extend(self.rng.next_gf256_element() for _ in range(degree - 1))
        coeffs.append(self.rng.next_nonzero_gf256_element())
        return coeffs

    def generate_multiple_polynomials(
        self,
        secrets: Sequence[int],
        threshold: int,
        field_size: int = gf256.FIELD_SIZE,
    ) -> list[list[int]]:
        """One independent polynomial per secret."""
        if not secrets:
            raise InvalidArgument("Secrets list cannot be empty")
        return [self.generate_polynomial(s, threshold, field_size) for s in secrets]

    def generate_for_byte_array(
        self,
        secret_bytes: bytes,
        threshold: int,
    ) -> list[list[int]]:
        if not secret_bytes:
            raise InvalidArgument("Secret bytes cannot be empty")
        return self.generate_multiple_polynomials(list(secret_bytes), threshold)

    def generate_evaluation_points(self, n: int) -> list[int]:
        """n distinct random non-zero field elements, sorted ascending."""
        _check_point_count(n)
        points: set[int] = set()
        while len(points) < n:
            points.add(self.rng.next_nonzero_gf256_element())
        return sorted(points)

    @staticmethod
    def sequential_evaluation_points(n: int) -> list[int]:
        """The fixed layout 1..n."""
        _check_point_count(n)
        return list(range(1, n + 1))

    @staticmethod
    def evaluate_polynomial(coefficients: Sequence[int], x: int) -> int:
        if not gf256.is_valid_element(x):
            raise InvalidElement(f"x must be a GF(256) element (0-255), got {x!r}")
        return gf256.evaluate_polynomial(coefficients, x)


def _check_point_count(n: int) -> None:
    if n < 1:
        raise InvalidArgument(f"Number of points must be at least 1, got {n}")
    if n > MAX_EVALUATION_POINTS:
        raise InvalidArgument(
            f"Cannot generate more than {MAX_EVALUATION_POINTS} points in GF(256), got {n}"
        )


def validate_polynomial(coefficients: Sequence[int]) -> bool:
    """All coefficients are field elements and, unless constant, the top one is non-zero."""
    if not coefficients:
        return False
    if not all(gf256.is_valid_element(c) for c in coefficients):
        return False
    if len(coefficients) > 1:
        return coefficients[-1] != 0
    return True


def polynomial_degree(coefficients: Sequence[int]) -> int:
    """Index of the highest non-zero coefficient; -1 if empty, 0 if all zero."""
    if not coefficients:
        return -1
    for i in range(len(coefficients) - 1, -1, -1):
        if coefficients[i] != 0:
            return i
    return 0
