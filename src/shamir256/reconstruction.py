"""Secret reconstruction from shares via Lagrange interpolation at x = 0.

Every function here is pure. ProgressiveReconstructor is the one stateful
piece; it is not internally synchronized.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from shamir256 import gf256
from shamir256.errors import (
    DuplicateXCoordinate,
    EmptyShares,
    InconsistentMetadata,
    InsufficientShares,
    InsufficientShareSets,
    InvalidArgument,
    InvalidShare,
    ShamirError,
    ShareAuthenticationFailed,
)
from shamir256.models import MAX_SHARES, MAX_VERSION, SecureShare, Share, ShareSet

logger = logging.getLogger(__name__)


def reconstruct_secret(shares: Sequence[Share]) -> int:
    """Recover one secret byte from shares. Order does not matter.

    Passing more shares than the threshold gives the same result: any K
    points on a degree K-1 polynomial determine the same f(0).
    """
    if not shares:
        raise EmptyShares("Cannot reconstruct from empty shares")
    for share in shares:
        if not share.is_valid:
            raise InvalidShare(f"Invalid share: {share!r}")

    xs = [s.x for s in shares]
    if len(set(xs)) != len(xs):
        raise DuplicateXCoordinate("Duplicate x values in shares")

    return gf256.lagrange_interpolate(xs, [s.y for s in shares])


def reconstruct_from_secure_shares(
    shares: Sequence[SecureShare],
    key: bytes | None = None,
) -> int:
    """Recover one secret byte from MAC-tagged shares.

    All shares must agree on (threshold, total_shares) and carry a MAC that
    verifies under key. Uses the first threshold shares.
    """
    if not shares:
        raise EmptyShares("Cannot reconstruct from empty shares")

    threshold = shares[0].threshold
    total_shares = shares[0].total_shares
    if not 2 <= threshold <= total_shares <= MAX_SHARES:
        raise InconsistentMetadata(
            f"Need 2 <= threshold <= total_shares <= {MAX_SHARES}, "
            f"got threshold={threshold}, total_shares={total_shares}"
        )
    for share in shares:
        if (share.threshold, share.total_shares) != (threshold, total_shares):
            raise InconsistentMetadata(
                f"Share at x={share.x} has threshold={share.threshold}, "
                f"total_shares={share.total_shares}; expected {threshold}, {total_shares}"
            )
        if not 0 <= share.version <= MAX_VERSION:
            raise InvalidShare(f"Share at x={share.x} has unsupported version {share.version}")
        if not share.verify_mac(key):
            raise ShareAuthenticationFailed(f"Share at x={share.x} failed MAC verification")

    if len(shares) < threshold:
        raise InsufficientShares(f"Need {threshold} shares, got {len(shares)}")

    return reconstruct_secret([s.to_share() for s in shares[:threshold]])


def reconstruct_from_share_sets(share_sets: Sequence[ShareSet]) -> bytes:
    """Recover a multi-byte secret, one independent interpolation per byte."""
    if not share_sets:
        raise InsufficientShareSets("Cannot reconstruct from empty share sets")

    reference = share_sets[0].metadata
    for share_set in share_sets:
        if share_set.metadata.group_key != reference.group_key:
            raise InconsistentMetadata(
                "Share sets come from different split operations: "
                f"{share_set.metadata.group_key} != {reference.group_key}"
            )
        if len(share_set.shares) != reference.secret_length:
            raise InvalidShare(
                f"Share set holds {len(share_set.shares)} shares, "
                f"expected {reference.secret_length}"
            )

    threshold = reference.threshold
    if len(share_sets) < threshold:
        raise InsufficientShareSets(f"Need {threshold} share sets, got {len(share_sets)}")

    selected = share_sets[:threshold]
    return bytes(
        reconstruct_secret([s.shares[position] for s in selected])
        for position in range(reference.secret_length)
    )


def can_reconstruct(shares: Sequence[Share], threshold: int) -> bool:
    """Whether reconstruct_secret would accept these shares, without running it."""
    if len(shares) < threshold:
        return False
    if not all(s.is_valid for s in shares):
        return False
    return len({s.x for s in shares}) == len(shares)


@dataclass
class ReconstructionResult:
    """Outcome of a reconstruction that reports failure instead of raising.

    Attributes:
        success: Whether a consistent secret was recovered.
        secret: The recovered byte when successful.
        error: Human-readable reason when unsuccessful.
        metadata: Diagnostic counters.
    """

    success: bool
    secret: int | None = None
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


def reconstruct_with_verification(
    shares: Sequence[Share],
    threshold: int,
) -> ReconstructionResult:
    """Reconstruct from the first threshold shares and cross-check redundant ones.

    Every contiguous window of threshold shares is reconstructed as well;
    any window that disagrees with the first marks the set as corrupted.
    Windows that raise are skipped but counted in metadata["failed_windows"].

    This detects inconsistency only. It cannot tell which share is bad, and
    a corruption that happens to keep every window consistent goes unnoticed.
    """
    if threshold < 1:
        raise InvalidArgument(f"Threshold must be positive, got {threshold}")
    if len(shares) < threshold:
        return ReconstructionResult(
            success=False,
            error=f"Insufficient shares for reconstruction: need {threshold}, got {len(shares)}",
        )

    try:
        primary = reconstruct_secret(shares[:threshold])
    except ShamirError as exc:
        return ReconstructionResult(success=False, error=f"Reconstruction failed: {exc}")

    windows = len(shares) - threshold + 1 if len(shares) > threshold else 0
    failed = 0
    mismatched = 0
    for start in range(windows):
        try:
            value = reconstruct_secret(shares[start : start + threshold])
        except ShamirError as exc:
            failed += 1
            logger.warning("Skipping verification window at %d: %s", start, exc)
            continue
        if value != primary:
            mismatched += 1

    metadata = {
        "windows_checked": windows,
        "failed_windows": failed,
        "mismatched_windows": mismatched,
    }
    if mismatched:
        logger.warning(
            "Inconsistent reconstruction in %d of %d windows", mismatched, windows
        )
        return ReconstructionResult(
            success=False,
            error="Inconsistent reconstruction results - possible corrupted shares",
            metadata=metadata,
        )
    return ReconstructionResult(success=True, secret=primary, metadata=metadata)


class ProgressiveReconstructor:
    """Accumulates shares one at a time and reconstructs once enough arrive.

    Args:
        threshold: Number of distinct shares required.
    """

    def __init__(self, threshold: int) -> None:
        if threshold < 1:
            raise InvalidArgument(f"Threshold must be positive, got {threshold}")
        self.threshold = threshold
        self._shares: list[Share] = []
        self._complete = False
        self._secret: int | None = None

    def add_share(self, share: Share) -> bool:
        """Add a share; returns whether reconstruction is complete.

        A share whose x is already held is ignored and False is returned.
        """
        if not share.is_valid:
            raise InvalidShare(f"Invalid share: {share!r}")
        if any(s.x == share.x for s in self._shares):
            return False

        self._shares.append(share)
        if len(self._shares) >= self.threshold and not self._complete:
            try:
                self._secret = reconstruct_secret(self._shares[: self.threshold])
            except ShamirError as exc:
                logger.warning("Progressive reconstruction attempt failed: %s", exc)
            else:
                self._complete = True
        return self._complete

    @property
    def share_count(self) -> int:
        return len(self._shares)

    @property
    def is_complete(self) -> bool:
        return self._complete

    @property
    def secret(self) -> int | None:
        return self._secret

    @property
    def progress(self) -> float:
        return min(1.0, len(self._shares) / self.threshold)

    @property
    def shares(self) -> tuple[Share, ...]:
        return tuple(self._shares)

    def reset(self) -> None:
        self._shares.clear()
        self._complete = False
        self._secret = None


def _reconstruct_group(shares: Sequence[Share], threshold: int) -> int:
    if len(shares) < threshold:
        raise InsufficientShares(
            f"Insufficient shares in group: need {threshold}, got {len(shares)}"
        )
    return reconstruct_secret(shares[:threshold])


def reconstruct_multiple(
    share_groups: Sequence[Sequence[Share]],
    threshold: int,
) -> list[int]:
    """Reconstruct one byte per group, stopping at the first failing group."""
    return [_reconstruct_group(shares, threshold) for shares in share_groups]


def reconstruct_parallel(
    share_groups: Sequence[Sequence[Share]],
    threshold: int,
    max_workers: int | None = None,
) -> list[int]:
    """Thread-pool variant of reconstruct_multiple with identical results.

    Results keep group order and the error raised is that of the first
    failing group in order.
    """
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(
            pool.map(_reconstruct_group, share_groups, [threshold] * len(share_groups))
        )
