"""Fixed-length decimal digit sequences.

A :class:`DigitSequence` holds one decimal digit per pixel, most significant
digit first.  Its length is fixed at construction; the only mutation is a
single-digit :meth:`DigitSequence.substitute`.  Leading zeros are kept in the
sequence and ignored by the integer value.
"""

from typing import Iterable, List, Tuple

import numpy as np

import big_integer

PIXEL_MODULI = (9, 10)


class DigitSequenceError(ValueError):
    pass


class LengthOverflow(DigitSequenceError):
    """The integer needs more digits than the sequence length allows."""


class InvalidDigit(DigitSequenceError):
    pass


class InvalidPosition(DigitSequenceError, IndexError):
    pass


def _check_digit(digit) -> int:
    if isinstance(digit, bool) or not isinstance(digit, (int, np.integer)):
        raise InvalidDigit(f"Digit must be an int, got {type(digit).__name__}")
    if not 0 <= digit <= 9:
        raise InvalidDigit(f"Digit out of range [0, 9]: {digit}")
    return int(digit)


class DigitSequence:
    __slots__ = ("_digits",)

    def __init__(self, digits: Iterable[int]):
        self._digits: List[int] = [_check_digit(d) for d in digits]
        if not self._digits:
            raise DigitSequenceError("Digit sequence must not be empty")

    # ─────────────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_pixels(cls, pixels, modulus: int = 10) -> "DigitSequence":
        """One digit per pixel, ``intensity % modulus``, in row-major order."""
        if modulus not in PIXEL_MODULI:
            raise ValueError(f"modulus must be one of {PIXEL_MODULI}, got {modulus}")
        flat = np.asarray(pixels).reshape(-1)
        if flat.size and (not np.issubdtype(flat.dtype, np.integer) or flat.min() < 0):
            raise ValueError("Pixel intensities must be non-negative integers")
        return cls((flat.astype(np.int64) % modulus).tolist())

    @classmethod
    def from_string(cls, num_str: str) -> "DigitSequence":
        num_str = num_str.strip()
        for ch in num_str:
            if not ("0" <= ch <= "9"):
                raise InvalidDigit(f"Not a decimal digit: {ch!r}")
        return cls(int(ch) for ch in num_str)

    @classmethod
    def from_integer(cls, value, length: int) -> "DigitSequence":
        """Render ``value`` in base 10, left-padded with zeros to ``length``."""
        if length < 1:
            raise ValueError(f"length must be positive, got {length}")
        num_str = big_integer.to_digit_string(value)
        if len(num_str) > length:
            raise LengthOverflow(
                f"Value has {len(num_str)} digits but the sequence holds {length}"
            )
        return cls.from_string(num_str.zfill(length))

    def copy(self) -> "DigitSequence":
        clone = object.__new__(DigitSequence)
        clone._digits = list(self._digits)
        return clone

    # ─────────────────────────────────────────────────────────────────────────
    # Conversion
    # ─────────────────────────────────────────────────────────────────────────

    def to_integer(self):
        return big_integer.from_digit_string(str(self))

    def rows(self, width: int) -> List[List[int]]:
        """Row-major rows of ``width`` digits; the last row may be short."""
        if width < 1:
            raise ValueError(f"width must be positive, got {width}")
        return [self._digits[i:i + width] for i in range(0, len(self._digits), width)]

    def diff(self, other: "DigitSequence") -> List[int]:
        """Positions where ``other`` holds a different digit."""
        if len(other) != len(self):
            raise ValueError("Sequences must have the same length")
        return [i for i, (a, b) in enumerate(zip(self._digits, other)) if a != b]

    # ─────────────────────────────────────────────────────────────────────────
    # Mutation
    # ─────────────────────────────────────────────────────────────────────────

    def substitute(self, position: int, digit: int) -> int:
        """Replace the digit at ``position`` in place and return the old one."""
        if isinstance(position, bool) or not isinstance(position, (int, np.integer)):
            raise InvalidPosition(f"Position must be an int, got {type(position).__name__}")
        if not 0 <= position < len(self._digits):
            raise InvalidPosition(
                f"Position {position} outside [0, {len(self._digits)})"
            )
        digit = _check_digit(digit)
        previous = self._digits[position]
        self._digits[position] = digit
        return previous

    # ─────────────────────────────────────────────────────────────────────────
    # Sequence protocol
    # ─────────────────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._digits)

    def __getitem__(self, index):
        return self._digits[index]

    def __iter__(self):
        return iter(self._digits)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DigitSequence):
            return NotImplemented
        return self._digits == other._digits

    __hash__ = None

    def __str__(self) -> str:
        return "".join(map(str, self._digits))

    def __repr__(self) -> str:
        text = str(self)
        if len(text) > 40:
            text = f"{text[:18]}...{text[-18:]}"
        return f"DigitSequence({text!r}, length={len(self)})"

    def __getstate__(self) -> Tuple[int, ...]:
        return tuple(self._digits)

    def __setstate__(self, state) -> None:
        self._digits = list(state)


def to_integer(seq: DigitSequence):
    return seq.to_integer()


def from_integer(value, length: int) -> DigitSequence:
    return DigitSequence.from_integer(value, length)
