"""Monte Carlo simulation of share corruption against redundancy verification.

Measures how often reconstruct_with_verification flags corrupted shares,
and how often a corrupted share silently yields a wrong secret (always the
case when no redundant share is available).
"""

from __future__ import annotations

from dataclasses import dataclass

from shamir256.errors import InvalidArgument
from shamir256.models import Share
from shamir256.reconstruction import reconstruct_with_verification
from shamir256.secure_random import SecureRandom
from shamir256.shamir import ShamirSecretSharing


@dataclass
class SimulationResult:
    """Aggregated results from a Monte Carlo simulation run.

    Attributes:
        n_trials: Number of simulation trials.
        n_corrupted: Shares corrupted per trial.
        n_detected: Trials where verification reported inconsistency.
        n_silent_wrong: Trials that reported success with a wrong secret.
        n_correct: Trials that reported success with the right secret.
        detection_rate: n_detected / n_trials.
        silent_wrong_rate: n_silent_wrong / n_trials.
        correct_rate: n_correct / n_trials.
    """

    n_trials: int
    n_corrupted: int
    n_detected: int
    n_silent_wrong: int
    n_correct: int
    detection_rate: float
    silent_wrong_rate: float
    correct_rate: float


@dataclass
class TrialOutcome:
    """Outcome of a single simulation trial."""

    shares: list[Share]
    corrupted_xs: list[int]
    original_secret: int
    reported_secret: int | None
    detected: bool


class CorruptionSimulator:
    """Monte Carlo engine for corrupted-share experiments.

    Args:
        threshold: Shamir reconstruction threshold.
        total_shares: Shares produced per trial, all passed to verification.
        seed: Seed for a reproducible generator; None uses the OS CSPRNG.
    """

    def __init__(
        self,
        threshold: int,
        total_shares: int,
        seed: int | None = None,
    ) -> None:
        if not 2 <= threshold <= total_shares:
            raise InvalidArgument(
                f"Need 2 <= threshold <= total_shares, got t={threshold}, n={total_shares}"
            )
        self.threshold = threshold
        self.total_shares = total_shares
        self.rng = SecureRandom.seeded(seed) if seed is not None else SecureRandom()
        self.sss = ShamirSecretSharing(self.rng)

    def simulate_trial(self, n_corrupted: int, secret: int | None = None) -> TrialOutcome:
        """Split, corrupt n_corrupted shares, shuffle, then verify.

        Corruption XORs a share's y with a non-zero byte, so a corrupted
        share always lies off the polynomial.
        """
        if not 0 <= n_corrupted <= self.total_shares:
            raise InvalidArgument(
                f"n_corrupted must be in [0, {self.total_shares}], got {n_corrupted}"
            )
        if secret is None:
            secret = self.rng.next_gf256_element()

        shares = self.sss.share_byte(secret, self.threshold, self.total_shares)
        victims = self.rng.unique_integers(n_corrupted, self.total_shares) if n_corrupted else []
        for i in victims:
            s = shares[i]
            shares[i] = Share(x=s.x, y=s.y ^ self.rng.next_nonzero_gf256_element())
        corrupted_xs = [shares[i].x for i in victims]
        self.rng.shuffle(shares)

        result = reconstruct_with_verification(shares, self.threshold)
        return TrialOutcome(
            shares=shares,
            corrupted_xs=corrupted_xs,
            original_secret=secret,
            reported_secret=result.secret if result.success else None,
            detected=not result.success,
        )

    def run(self, n_corrupted: int, n_trials: int = 1000) -> SimulationResult:
        """Run multiple trials and aggregate the results."""
        if n_trials < 1:
            raise InvalidArgument(f"n_trials must be positive, got {n_trials}")

        n_detected = 0
        n_silent_wrong = 0
        n_correct = 0
        for _ in range(n_trials):
            outcome = self.simulate_trial(n_corrupted)
            if outcome.detected:
                n_detected += 1
            elif outcome.reported_secret == outcome.original_secret:
                n_correct += 1
            else:
                n_silent_wrong += 1

        return SimulationResult(
            n_trials=n_trials,
            n_corrupted=n_corrupted,
            n_detected=n_detected,
            n_silent_wrong=n_silent_wrong,
            n_correct=n_correct,
            detection_rate=n_detected / n_trials,
            silent_wrong_rate=n_silent_wrong / n_trials,
            correct_rate=n_correct / n_trials,
        )
