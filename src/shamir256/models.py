"""Value types for shares and share sets."""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from shamir256 import gf256
from shamir256.errors import InvalidArgument

SHARE_FORMAT_VERSION = 1
MAX_SHARES = gf256.FIELD_SIZE - 1
MAC_SALT = b"shamir256-share-mac-v1"
MAX_VERSION = 0xFFFF  # metadata fields are packed as 2 bytes in the MAC input


@dataclass(frozen=True)
class Share:
    """A single share (x, y) where y = f(x) over GF(256).

    Not validated on construction so that untrusted input can be
    represented and then rejected by the reconstruction routines.
    """

    x: int
    y: int

    @property
    def is_valid(self) -> bool:
        """Both coordinates are field elements and x is not the secret's point."""
        return gf256.is_valid_element(self.x) and gf256.is_valid_element(self.y) and self.x != 0


def derive_mac_key(
    threshold: int,
    total_shares: int,
    version: int = SHARE_FORMAT_VERSION,
    identifier: str | None = None,
) -> bytes:
    """Key derived from public share metadata.

    Anyone holding a share can recompute it, so a MAC under this key only
    detects accidental corruption. Pass an explicit key to
    compute_share_mac for authentication.
    """
    material = b"".join(v.to_bytes(2, "big") for v in (threshold, total_shares, version))
    material += identifier.encode("utf-8") if identifier is not None else MAC_SALT
    return hashlib.sha256(material).digest()


def compute_share_mac(
    x: int,
    y: int,
    threshold: int,
    total_shares: int,
    version: int = SHARE_FORMAT_VERSION,
    identifier: str | None = None,
    key: bytes | None = None,
) -> bytes:
    """HMAC-SHA256 over a share's coordinates and metadata."""
    if key is None:
        key = derive_mac_key(threshold, total_shares, version, identifier)
    message = bytes([x & 0xFF, y & 0xFF])
    message += b"".join(v.to_bytes(2, "big") for v in (threshold, total_shares, version))
    if identifier is not None:
        message += identifier.encode("utf-8")
    return hmac.new(key, message, hashlib.sha256).digest()


@dataclass(frozen=True)
class SecureShare(Share):
    """A share that carries its split parameters and an optional MAC."""

    threshold: int
    total_shares: int
    version: int = SHARE_FORMAT_VERSION
    identifier: str | None = None
    mac: bytes | None = field(default=None, repr=False)

    def expected_mac(self, key: bytes | None = None) -> bytes:
        return compute_share_mac(
            self.x,
            self.y,
            self.threshold,
            self.total_shares,
            self.version,
            self.identifier,
            key,
        )

    def signed(self, key: bytes | None = None) -> SecureShare:
        """Copy of this share with its MAC computed."""
        return replace(self, mac=self.expected_mac(key))

    def verify_mac(self, key: bytes | None = None) -> bool:
        """Constant-time MAC check. A share without a MAC does not verify."""
        if self.mac is None:
            return False
        if not all(0 <= v <= MAX_VERSION for v in (self.threshold, self.total_shares, self.version)):
            return False
        return hmac.compare_digest(self.mac, self.expected_mac(key))

    def to_share(self) -> Share:
        return Share(x=self.x, y=self.y)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ShareSetMetadata:
    """Parameters common to every share set of one split.

    Attributes:
        id: Identifier shared by all share sets of the same secret.
        threshold: K, share sets needed to reconstruct.
        total_shares: N, share sets produced.
        secret_length: Number of bytes in the secret.
        share_index: Which participant (1..N) this set belongs to, if known.
        created_at: Time of the split.
        description: Free-form caller label.
    """

    id: str
    threshold: int
    total_shares: int
    secret_length: int
    share_index: int | None = None
    created_at: datetime = field(default_factory=_utcnow, compare=False)
    description: str | None = None

    def __post_init__(self) -> None:
        if not 2 <= self.threshold <= self.total_shares <= MAX_SHARES:
            raise InvalidArgument(
                "Need 2 <= threshold <= total_shares <= "
                f"{MAX_SHARES}, got threshold={self.threshold}, "
                f"total_shares={self.total_shares}"
            )
        if self.secret_length < 1:
            raise InvalidArgument(f"secret_length must be positive, got {self.secret_length}")
        if self.share_index is not None and not 1 <= self.share_index <= self.total_shares:
            raise InvalidArgument(
                f"share_index must be in [1, {self.total_shares}], got {self.share_index}"
            )

    @property
    def group_key(self) -> tuple[int, int, int, str]:
        """Fields that must match across share sets reconstructed together."""
        return (self.threshold, self.total_shares, self.secret_length, self.id)


@dataclass(frozen=True)
class ShareSet:
    """One participant's shares: one Share per secret byte position."""

    shares: tuple[Share, ...]
    metadata: ShareSetMetadata

    def __post_init__(self) -> None:
        object.__setattr__(self, "shares", tuple(self.shares))

    def share_at(self, index: int) -> Share | None:
        if not 0 <= index < len(self.shares):
            return None
        return self.shares[index]

    @property
    def x(self) -> int | None:
        """The evaluation point common to all shares of this set."""
        return self.shares[0].x if self.shares else None

    @property
    def is_valid(self) -> bool:
        """One valid share per secret byte, all at the same x."""
        return (
            len(self.shares) == self.metadata.secret_length
            and all(s.is_valid for s in self.shares)
            and len({s.x for s in self.shares}) == 1
        )
