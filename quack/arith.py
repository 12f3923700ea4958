import re

QUEUE_MODULO = 65536
CHAR_MODULO = 256

_INT_LITERAL = re.compile(r"[+-]?[0-9]+")

# Below the smallest digit limit CPython accepts for int<->str conversion.
_DIGIT_CHUNK = 600
_CHUNK_BOUND = 10**_DIGIT_CHUNK


def is_int_literal(token: str) -> bool:
    """Return True when the whole token is a signed decimal integer."""
    return _INT_LITERAL.fullmatch(token) is not None


def parse_int(literal: str) -> int:
    """Decimal literal to int, without the interpreter's digit limit."""
    digits = literal.lstrip("+-")
    value = _parse_digits(digits)
    return -value if literal.startswith("-") else value


def _parse_digits(digits: str) -> int:
    if len(digits) <= _DIGIT_CHUNK:
        return int(digits)
    half = len(digits) // 2
    return _parse_digits(digits[:-half]) * 10**half + _parse_digits(digits[-half:])


def format_int(value: int) -> str:
    """Decimal text of an int of any size."""
    if value < 0:
        return "-" + _format_digits(-value)
    return _format_digits(value)


def _format_digits(value: int, width: int = 0) -> str:
    if value < _CHUNK_BOUND:
        return str(value).zfill(width)
    # bit_length * 0.15 is about half the decimal digit count
    half = value.bit_length() * 3 // 20
    high, low = divmod(value, 10**half)
    return (_format_digits(high) + _format_digits(low, half)).zfill(width)


def trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero; a zero divisor yields 0."""
    if b == 0:
        return 0
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def trunc_mod(a: int, b: int) -> int:
    """Remainder whose sign follows the dividend; a zero divisor yields 0.

    This is the remainder paired with `trunc_div`, not Python's floored `%`:
    ``trunc_mod(-7, 3) == -1`` while ``-7 % 3 == 2``.
    """
    if b == 0:
        return 0
    remainder = abs(a) % abs(b)
    return remainder if a >= 0 else -remainder


def char_code(value: int) -> int:
    """Code point written by the character output instructions."""
    return trunc_mod(value, CHAR_MODULO) & 0xFFFF


__all__ = [
    "CHAR_MODULO",
    "QUEUE_MODULO",
    "char_code",
    "format_int",
    "is_int_literal",
    "parse_int",
    "trunc_div",
    "trunc_mod",
]
