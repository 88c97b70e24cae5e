"""Shared test fixtures for the shamir256 test suite."""

from __future__ import annotations

import pytest

from shamir256.secure_random import SecureRandom
from shamir256.shamir import ShamirSecretSharing


@pytest.fixture
def rng() -> SecureRandom:
    """Deterministic generator so failures are reproducible."""
    return SecureRandom.seeded(1234)


@pytest.fixture
def sss(rng: SecureRandom) -> ShamirSecretSharing:
    return ShamirSecretSharing(rng)


@pytest.fixture
def sequential_sss(rng: SecureRandom) -> ShamirSecretSharing:
    """Splitter using x = 1..N."""
    return ShamirSecretSharing(rng, sequential_points=True)
