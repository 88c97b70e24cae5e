"""Typed failures raised by the secret sharing core.

Each class also derives from the builtin exception a caller would expect
for the same condition, so ``except ValueError`` keeps working.
"""

from __future__ import annotations


class ShamirError(Exception):
    """Base class for every error raised by shamir256."""


class InvalidArgument(ShamirError, ValueError):
    """Out-of-range size, count or threshold."""


class InvalidThreshold(InvalidArgument):
    pass


class ThresholdExceedsField(InvalidArgument):
    pass


class InvalidSecret(InvalidArgument):
    pass


class InvalidElement(ShamirError, ValueError):
    """A value outside [0, 255] where a field element was required."""


class InvalidShare(ShamirError, ValueError):
    """A malformed share: x or y outside the field, or x == 0."""


class DuplicateXCoordinate(ShamirError, ValueError):
    """Two shares in one reconstruction attempt carry the same x."""


class InsufficientShares(ShamirError, ValueError):
    """Fewer shares than the threshold were supplied."""


class EmptyShares(InsufficientShares):
    pass


class InsufficientShareSets(InsufficientShares):
    pass


class InconsistentMetadata(ShamirError, ValueError):
    """Shares or share sets from different split operations were mixed."""


class ShareAuthenticationFailed(ShamirError, ValueError):
    """A share's MAC did not verify."""


class DivisionByZero(ShamirError, ZeroDivisionError):
    pass


class EmptyInput(ShamirError, ValueError):
    pass
