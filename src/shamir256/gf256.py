"""Arithmetic in GF(2^8) with the AES reducing polynomial.

Elements are ints in [0, 255]. Addition and subtraction are XOR.
Multiplication and inversion go through exp/log tables generated once at
import from the generator 3; ``multiply_reference`` is the carry-less
multiply the tables are built from and checked against.

The reducing polynomial x^8 + x^4 + x^3 + x + 1 (0x11B) is a protocol
constant: shares produced with a different polynomial do not interoperate.
"""

from __future__ import annotations

from collections.abc import Sequence
from numbers import Integral

from shamir256.errors import (
    DivisionByZero,
    DuplicateXCoordinate,
    EmptyInput,
    InvalidElement,
)

IRREDUCIBLE_POLYNOMIAL = 0x11B
GENERATOR = 3
FIELD_SIZE = 256
ORDER = FIELD_SIZE - 1  # size of the multiplicative group


def multiply_reference(a: int, b: int) -> int:
    """Russian-peasant multiply with reduction by IRREDUCIBLE_POLYNOMIAL."""
    result = 0
    while b:
        if b & 1:
            result ^= a
        a <<= 1
        if a & 0x100:
            a ^= IRREDUCIBLE_POLYNOMIAL
        b >>= 1
    return result & 0xFF


def _build_tables() -> tuple[list[int], list[int], list[int]]:
    # exp is doubled so exp[log a + log b] never needs a modulo
    exp = [0] * (2 * ORDER)
    log = [0] * FIELD_SIZE
    value = 1
    for i in range(ORDER):
        exp[i] = value
        log[value] = i
        value = multiply_reference(value, GENERATOR)
    for i in range(ORDER, 2 * ORDER):
        exp[i] = exp[i - ORDER]

    inv = [0] * FIELD_SIZE
    for a in range(1, FIELD_SIZE):
        inv[a] = exp[ORDER - log[a]]
    return exp, log, inv


_EXP, _LOG, _INV = _build_tables()


def is_valid_element(value: object) -> bool:
    """True iff value is an integer (numpy integers included) in [0, 255]."""
    return isinstance(value, Integral) and not isinstance(value, bool) and 0 <= value <= 255


def _check(*values: int) -> None:
    for v in values:
        if not is_valid_element(v):
            raise InvalidElement(f"Not a GF(256) element: {v!r}")


def add(a: int, b: int) -> int:
    _check(a, b)
    return a ^ b


def sub(a: int, b: int) -> int:
    """Subtraction; identical to addition in characteristic 2."""
    _check(a, b)
    return a ^ b


def multiply(a: int, b: int) -> int:
    _check(a, b)
    if a == 0 or b == 0:
        return 0
    return _EXP[_LOG[a] + _LOG[b]]


def inverse(a: int) -> int:
    """Multiplicative inverse. Zero has none."""
    _check(a)
    if a == 0:
        raise DivisionByZero("0 has no multiplicative inverse in GF(256)")
    return _INV[a]


def divide(a: int, b: int) -> int:
    _check(a, b)
    if b == 0:
        raise DivisionByZero("Division by zero in GF(256)")
    if a == 0:
        return 0
    return _EXP[_LOG[a] + ORDER - _LOG[b]]


def power(a: int, n: int) -> int:
    """a**n by square-and-multiply. 0**0 is taken as 1."""
    _check(a)
    if n < 0:
        return power(inverse(a), -n)
    result = 1
    base = a
    while n:
        if n & 1:
            result = multiply(result, base)
        base = multiply(base, base)
        n >>= 1
    return result


def evaluate_polynomial(coefficients: Sequence[int], x: int) -> int:
    """Evaluate sum(c_i * x^i) with Horner's method; coefficients[0] is c0."""
    _check(x, *coefficients)
    result = 0
    for c in reversed(coefficients):
        result = multiply(result, x) ^ c
    return result


def lagrange_interpolate(xs: Sequence[int], ys: Sequence[int]) -> int:
    """Value at x = 0 of the unique polynomial through (xs[i], ys[i]).

    With subtraction being XOR, the basis polynomial for point i at 0 is:
        L_i(0) = prod_{j != i} x_j / (x_j ^ x_i)

    and the result is the XOR (field sum) of ys[i] * L_i(0).
    """
    if not xs or len(xs) != len(ys):
        raise EmptyInput(
            f"Need equal, non-empty x and y lists, got {len(xs)} and {len(ys)}"
        )
    _check(*xs, *ys)
    if len(set(xs)) != len(xs):
        raise DuplicateXCoordinate("Duplicate x coordinates in interpolation input")

    secret = 0
    for i, (xi, yi) in enumerate(zip(xs, ys)):
        basis = 1
        for j, xj in enumerate(xs):
            if i == j:
                continue
            basis = multiply(basis, divide(xj, xj ^ xi))
        secret ^= multiply(yi, basis)
    return secret
