"""Arbitrary-precision integers for digit images.

Thin layer over ``gmpy2.mpz``: construction from decimal digit strings and
byte strings, decimal rendering and a compact magnitude description used in
console summaries.  Values are always non-negative.
"""

import sys

from gmpy2 import mpz

# ─────────────────────────────────────────────────────────────────────────────
# Lift Python's big-int→str limit (3.11+)
# ─────────────────────────────────────────────────────────────────────────────
if hasattr(sys, "set_int_max_str_digits"):
    sys.set_int_max_str_digits(100_000_000)

BYTE_ORDERS = ("big", "little")


def _check_non_negative(n) -> None:
    if n < 0:
        raise ValueError("Negative numbers not supported")


# ─────────────────────────────────────────────────────────────────────────────
# Decimal strings
# ─────────────────────────────────────────────────────────────────────────────

def from_digit_string(num_str: str) -> mpz:
    """Parse ``num_str`` (decimal digits only, leading zeros allowed)."""
    num_str = num_str.strip()
    if not num_str or not num_str.isdigit() or not num_str.isascii():
        raise ValueError(f"Not a decimal digit string: {num_str[:32]!r}")
    return mpz(num_str, 10)


def to_digit_string(n) -> str:
    """Decimal rendering of ``n`` without padding."""
    _check_non_negative(n)
    return mpz(n).digits(10)


def digit_count(n) -> int:
    """Number of decimal digits of ``n`` (``0`` has one digit)."""
    # gmpy2.num_digits may overshoot by one, so count the rendering
    return len(to_digit_string(n))


# ─────────────────────────────────────────────────────────────────────────────
# Byte strings
# ─────────────────────────────────────────────────────────────────────────────

def from_bytes(data: bytes, byteorder: str = "big") -> mpz:
    """Unsigned integer from ``data`` in the given byte order."""
    if byteorder not in BYTE_ORDERS:
        raise ValueError(f"byteorder must be one of {BYTE_ORDERS}, got {byteorder!r}")
    return mpz(int.from_bytes(bytes(data), byteorder))


def to_bytes(n, byteorder: str = "big") -> bytes:
    """Minimal-length unsigned byte string for ``n`` (``b"\\x00"`` for zero)."""
    if byteorder not in BYTE_ORDERS:
        raise ValueError(f"byteorder must be one of {BYTE_ORDERS}, got {byteorder!r}")
    _check_non_negative(n)
    value = int(n)
    length = max(1, (value.bit_length() + 7) // 8)
    return value.to_bytes(length, byteorder)


# ─────────────────────────────────────────────────────────────────────────────
# Console formatting
# ─────────────────────────────────────────────────────────────────────────────

def sci_approx(n, precision: int = 4) -> str:
    """Describe ``n`` in scientific notation, truncated to ``precision`` digits.

    ``sci_approx(31415926)`` gives ``"3.141e+7"``.
    """
    _check_non_negative(n)
    num_str = to_digit_string(n)
    exp = len(num_str) - 1
    lead = num_str[:precision].rstrip("0") or "0"
    if len(lead) > 1:
        lead = f"{lead[0]}.{lead[1:]}"
    return f"{lead}e+{exp}"
