"""Small numeric helpers shared by the parsers and the chunked encoder."""

_HEX_DIGITS = "0123456789abcdef"


def get_digits(number: int, base: int) -> int:
    """Return how many digits ``number`` takes when written in ``base``."""
    if base < 2:
        raise ValueError(f"base must be at least 2, got {base}")
    if number == 0:
        return 1
    remaining = abs(number)
    digits = 0
    while remaining:
        remaining //= base
        digits += 1
    return digits


def format_hex(number: int) -> str:
    """Write ``number`` as lower-case hexadecimal, as a chunk size is written."""
    return format(number, "x")


def hex_value(char: str) -> int:
    """Return the value of one hexadecimal digit, or -1 if it is not one."""
    if len(char) != 1:
        return -1
    return _HEX_DIGITS.find(char.lower())


def hex_to_int(data: str) -> int:
    """Convert a string of hexadecimal digits to an integer.

    An empty string is zero. Raises ValueError on a character that is not a
    hexadecimal digit.
    """
    total = 0
    for char in data:
        value = hex_value(char)
        if value < 0:
            raise ValueError(f"invalid hexadecimal digit {char!r}")
        total = total * 16 + value
    return total