"""Tests for shamir256.models data classes."""

from __future__ import annotations

import dataclasses

import pytest

from shamir256.models import (
    SecureShare,
    Share,
    ShareSet,
    ShareSetMetadata,
    compute_share_mac,
    derive_mac_key,
)


class TestShare:
    def test_valid(self):
        assert Share(x=1, y=0).is_valid
        assert Share(x=255, y=255).is_valid

    @pytest.mark.parametrize("x, y", [(0, 5), (256, 5), (-1, 5), (3, 256), (3, -1)])
    def test_invalid(self, x: int, y: int):
        assert not Share(x=x, y=y).is_valid

    def test_frozen(self):
        s = Share(x=1, y=2)
        with pytest.raises(AttributeError):
            s.x = 5  # type: ignore[misc]

    def test_value_semantics(self):
        assert Share(1, 2) == Share(1, 2)
        assert len({Share(1, 2), Share(1, 2), Share(2, 2)}) == 2

    def test_plain_dict(self):
        assert dataclasses.asdict(Share(x=3, y=4)) == {"x": 3, "y": 4}


class TestSecureShare:
    def test_signed_share_verifies(self):
        share = SecureShare(x=3, y=9, threshold=2, total_shares=3).signed()
        assert share.mac is not None and len(share.mac) == 32
        assert share.verify_mac()

    def test_missing_mac_does_not_verify(self):
        assert not SecureShare(x=3, y=9, threshold=2, total_shares=3).verify_mac()

    def test_tampered_y_fails(self):
        share = SecureShare(x=3, y=9, threshold=2, total_shares=3).signed()
        tampered = dataclasses.replace(share, y=10)
        assert not tampered.verify_mac()

    def test_tampered_metadata_fails(self):
        share = SecureShare(x=3, y=9, threshold=2, total_shares=3).signed()
        assert not dataclasses.replace(share, threshold=3).verify_mac()

    def test_keyed_mac(self):
        key = b"k" * 32
        share = SecureShare(x=3, y=9, threshold=2, total_shares=3).signed(key)
        assert share.verify_mac(key)
        assert not share.verify_mac(b"other-key")
        assert not share.verify_mac()

    def test_identifier_changes_mac(self):
        a = compute_share_mac(1, 2, 2, 3, identifier="a")
        b = compute_share_mac(1, 2, 2, 3, identifier="b")
        assert a != b

    def test_derived_key_is_deterministic(self):
        assert derive_mac_key(2, 3) == derive_mac_key(2, 3)
        assert derive_mac_key(2, 3) != derive_mac_key(2, 4)

    def test_to_share(self):
        share = SecureShare(x=3, y=9, threshold=2, total_shares=3)
        assert share.to_share() == Share(x=3, y=9)
        assert share.is_valid


class TestShareSetMetadata:
    def test_group_key(self):
        meta = ShareSetMetadata(id="SS-1", threshold=2, total_shares=3, secret_length=4)
        assert meta.group_key == (2, 3, 4, "SS-1")
        assert meta.share_index is None
        assert meta.created_at.tzinfo is not None

    @pytest.mark.parametrize(
        "threshold, total",
        [(1, 3), (4, 3), (2, 256)],
    )
    def test_invalid_parameters(self, threshold: int, total: int):
        with pytest.raises(ValueError, match="threshold"):
            ShareSetMetadata(id="x", threshold=threshold, total_shares=total, secret_length=1)

    def test_invalid_secret_length(self):
        with pytest.raises(ValueError, match="secret_length"):
            ShareSetMetadata(id="x", threshold=2, total_shares=3, secret_length=0)

    def test_invalid_share_index(self):
        with pytest.raises(ValueError, match="share_index"):
            ShareSetMetadata(id="x", threshold=2, total_shares=3, secret_length=1, share_index=4)


class TestShareSet:
    @pytest.fixture
    def meta(self) -> ShareSetMetadata:
        return ShareSetMetadata(id="SS-1", threshold=2, total_shares=3, secret_length=2)

    def test_valid(self, meta: ShareSetMetadata):
        ss = ShareSet(shares=[Share(7, 1), Share(7, 2)], metadata=meta)
        assert isinstance(ss.shares, tuple)
        assert ss.is_valid
        assert ss.x == 7

    def test_wrong_length(self, meta: ShareSetMetadata):
        assert not ShareSet(shares=[Share(7, 1)], metadata=meta).is_valid

    def test_mixed_x(self, meta: ShareSetMetadata):
        assert not ShareSet(shares=[Share(7, 1), Share(8, 2)], metadata=meta).is_valid

    def test_share_at(self, meta: ShareSetMetadata):
        ss = ShareSet(shares=[Share(7, 1), Share(7, 2)], metadata=meta)
        assert ss.share_at(1) == Share(7, 2)
        assert ss.share_at(2) is None
        assert ss.share_at(-1) is None
