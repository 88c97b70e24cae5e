"""(K, N)-threshold secret sharing of bytes and strings over GF(256).

Composes PolynomialGenerator and the reconstruction routines into split and
combine operations. Every byte of a secret gets its own polynomial; all
polynomials of one secret are evaluated at the same N points, and the
results are grouped into one ShareSet per participant.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from shamir256 import gf256
from shamir256.errors import (
    InconsistentMetadata,
    InsufficientShares,
    InvalidArgument,
    InvalidSecret,
    InvalidShare,
    InvalidThreshold,
    ShamirError,
)
from shamir256.models import (
    MAX_SHARES,
    SHARE_FORMAT_VERSION,
    SecureShare,
    Share,
    ShareSet,
    ShareSetMetadata,
)
from shamir256.polynomial import PolynomialGenerator
from shamir256.reconstruction import (
    can_reconstruct,
    reconstruct_from_share_sets,
    reconstruct_secret,
)
from shamir256.secure_random import SecureRandom

logger = logging.getLogger(__name__)

SHARE_SET_ID_BYTES = 8


@dataclass
class SplitResult:
    """Shares of a single-byte secret."""

    shares: list[SecureShare]
    threshold: int
    total_shares: int
    metadata: dict[str, Any] = field(default_factory=dict)

    def share(self, index: int) -> SecureShare | None:
        if not 0 <= index < len(self.shares):
            return None
        return self.shares[index]


@dataclass
class MultiSplitResult:
    """Share sets of a multi-byte secret, one per participant."""

    share_sets: list[ShareSet]
    threshold: int
    total_shares: int
    secret_length: int
    metadata: dict[str, Any] = field(default_factory=dict)

    def share_set(self, index: int) -> ShareSet | None:
        if not 0 <= index < len(self.share_sets):
            return None
        return self.share_sets[index]


def _check_split_params(threshold: int, total_shares: int) -> None:
    if threshold < 2:
        raise InvalidThreshold(f"Threshold must be at least 2, got {threshold}")
    if threshold > total_shares:
        raise InvalidArgument(
            f"Threshold cannot exceed number of shares, got t={threshold}, n={total_shares}"
        )
    if total_shares > MAX_SHARES:
        raise InvalidArgument(
            f"At most {MAX_SHARES} shares are possible in GF(256), got {total_shares}"
        )


class ShamirSecretSharing:
    """(N, K)-threshold secret sharing over GF(256).

    Args:
        rng: Randomness for coefficients, evaluation points and ids.
            Defaults to the process-wide SecureRandom.
        sequential_points: Use x = 1..N instead of random distinct points.
    """

    def __init__(
        self,
        rng: SecureRandom | None = None,
        sequential_points: bool = False,
    ) -> None:
        self.rng = rng if rng is not None else SecureRandom.default()
        self.polynomials = PolynomialGenerator(self.rng)
        self.sequential_points = sequential_points

    def evaluation_points(self, n: int) -> list[int]:
        if self.sequential_points:
            return self.polynomials.sequential_evaluation_points(n)
        return self.polynomials.generate_evaluation_points(n)

    def share_byte(self, secret: int, threshold: int, total_shares: int) -> list[Share]:
        """Plain (x, y) shares of one byte."""
        _check_split_params(threshold, total_shares)
        coeffs = self.polynomials.generate_polynomial(secret, threshold)
        return [
            Share(x=x, y=gf256.evaluate_polynomial(coeffs, x))
            for x in self.evaluation_points(total_shares)
        ]

    def split_byte(
        self,
        secret: int,
        threshold: int,
        total_shares: int,
        identifier: str | None = None,
        key: bytes | None = None,
    ) -> SplitResult:
        """Split one byte into MAC-tagged shares.

        Without a key the MAC is derived from public metadata and only
        detects corruption; pass a key to make it an authentication tag.
        """
        if not gf256.is_valid_element(secret):
            raise InvalidSecret(f"Secret must be a byte value (0-255), got {secret!r}")
        shares = [
            SecureShare(
                x=s.x,
                y=s.y,
                threshold=threshold,
                total_shares=total_shares,
                version=SHARE_FORMAT_VERSION,
                identifier=identifier,
            ).signed(key)
            for s in self.share_byte(secret, threshold, total_shares)
        ]
        logger.debug("Split byte secret into %d shares (threshold %d)", total_shares, threshold)
        return SplitResult(
            shares=shares,
            threshold=threshold,
            total_shares=total_shares,
            metadata={"type": "byte", "keyed": key is not None},
        )

    def split_bytes(
        self,
        secret: bytes,
        threshold: int,
        total_shares: int,
        description: str | None = None,
    ) -> MultiSplitResult:
        """Split a byte string into total_shares ShareSets."""
        if not secret:
            raise InvalidArgument("Secret cannot be empty")
        _check_split_params(threshold, total_shares)

        xs = self.evaluation_points(total_shares)
        polynomials = self.polynomials.generate_for_byte_array(secret, threshold)
        # by_position[byte][participant]
        by_position = [[gf256.evaluate_polynomial(p, x) for x in xs] for p in polynomials]

        set_id = f"SS-{self.rng.next_bytes(SHARE_SET_ID_BYTES).hex()}"
        share_sets = []
        for i, x in enumerate(xs):
            metadata = ShareSetMetadata(
                id=set_id,
                threshold=threshold,
                total_shares=total_shares,
                secret_length=len(secret),
                share_index=i + 1,
                description=description,
            )
            shares = tuple(Share(x=x, y=row[i]) for row in by_position)
            share_sets.append(ShareSet(shares=shares, metadata=metadata))

        logger.debug(
            "Split %d-byte secret %s into %d share sets (threshold %d)",
            len(secret),
            set_id,
            total_shares,
            threshold,
        )
        return MultiSplitResult(
            share_sets=share_sets,
            threshold=threshold,
            total_shares=total_shares,
            secret_length=len(secret),
            metadata={"type": "bytes", "id": set_id, "length": len(secret)},
        )

    def split_string(
        self,
        secret: str,
        threshold: int,
        total_shares: int,
        description: str | None = None,
    ) -> MultiSplitResult:
        """Split the UTF-8 encoding of a string."""
        if not secret:
            raise InvalidArgument("Secret cannot be empty")
        result = self.split_bytes(secret.encode("utf-8"), threshold, total_shares, description)
        result.metadata.update(type="string", encoding="utf-8")
        return result

    @staticmethod
    def combine_byte(shares: Sequence[Share], threshold: int) -> int:
        """Reconstruct one byte from the first threshold shares."""
        if len(shares) < threshold:
            raise InsufficientShares(f"Need at least {threshold} shares, got {len(shares)}")
        return reconstruct_secret(shares[:threshold])

    @staticmethod
    def combine_bytes(share_sets: Sequence[ShareSet]) -> bytes:
        return reconstruct_from_share_sets(share_sets)

    @staticmethod
    def combine_string(share_sets: Sequence[ShareSet]) -> str:
        return reconstruct_from_share_sets(share_sets).decode("utf-8")

    @staticmethod
    def verify_shares(shares: Sequence[Share], threshold: int) -> bool:
        """Whether the shares are structurally sufficient, without reconstructing."""
        return can_reconstruct(shares, threshold)

    @staticmethod
    def create_session(threshold: int, total_shares: int) -> ShamirSession:
        return ShamirSession(threshold=threshold, total_shares=total_shares)


class ShamirSession:
    """Collects whole share sets until the secret can be reconstructed.

    Not internally synchronized.

    Args:
        threshold: Share sets needed.
        total_shares: Share sets produced by the split.
    """

    def __init__(self, threshold: int, total_shares: int) -> None:
        _check_split_params(threshold, total_shares)
        self.threshold = threshold
        self.total_shares = total_shares
        self._collected: list[ShareSet] = []
        self._secret: bytes | None = None

    def add_share_set(self, share_set: ShareSet) -> bool:
        """Add a share set; returns whether the secret has been reconstructed.

        A set already held (same share index or x) is ignored.
        """
        meta = share_set.metadata
        if (meta.threshold, meta.total_shares) != (self.threshold, self.total_shares):
            logger.warning("Rejected share set %s with foreign parameters", meta.id)
            raise InconsistentMetadata(
                f"Share set has threshold={meta.threshold}, total_shares={meta.total_shares}; "
                f"session expects {self.threshold}, {self.total_shares}"
            )
        if self._collected and meta.group_key != self._collected[0].metadata.group_key:
            logger.warning("Rejected share set %s from a different split", meta.id)
            raise InconsistentMetadata("Share set belongs to a different split operation")
        if not share_set.is_valid:
            raise InvalidShare(
                f"Share set {meta.id} must hold {meta.secret_length} valid shares at one x"
            )

        for held in self._collected:
            same_index = meta.share_index is not None and held.metadata.share_index == meta.share_index
            if same_index or held.x == share_set.x:
                return False

        self._collected.append(share_set)
        if len(self._collected) >= self.threshold and self._secret is None:
            try:
                self._secret = reconstruct_from_share_sets(self._collected)
            except ShamirError as exc:
                logger.warning("Session reconstruction attempt failed: %s", exc)
        return self._secret is not None

    @property
    def progress(self) -> float:
        return min(1.0, len(self._collected) / self.threshold)

    @property
    def can_reconstruct(self) -> bool:
        return len(self._collected) >= self.threshold

    @property
    def is_reconstructed(self) -> bool:
        return self._secret is not None

    @property
    def secret_bytes(self) -> bytes | None:
        return self._secret

    @property
    def secret_string(self) -> str | None:
        """The secret decoded as UTF-8, or None if absent or not valid UTF-8."""
        if self._secret is None:
            return None
        try:
            return self._secret.decode("utf-8")
        except UnicodeDecodeError:
            return None

    @property
    def shares_collected(self) -> int:
        return len(self._collected)

    @property
    def shares_needed(self) -> int:
        return max(0, self.threshold - len(self._collected))

    def status(self) -> dict[str, Any]:
        return {
            "threshold": self.threshold,
            "total_shares": self.total_shares,
            "shares_collected": self.shares_collected,
            "shares_needed": self.shares_needed,
            "progress": self.progress,
            "can_reconstruct": self.can_reconstruct,
            "is_reconstructed": self.is_reconstructed,
        }

    def reset(self) -> None:
        self._collected.clear()
        self._secret = None


def split(
    secret: bytes,
    threshold: int,
    total_shares: int,
    rng: SecureRandom | None = None,
) -> list[ShareSet]:
    """Convenience: split secret into total_shares share sets."""
    return ShamirSecretSharing(rng).split_bytes(secret, threshold, total_shares).share_sets


def reconstruct(share_sets: Sequence[ShareSet]) -> bytes:
    """Convenience: recover the secret from at least threshold share sets."""
    return reconstruct_from_share_sets(share_sets)
