"""Zigzag mapping between signed and unsigned integers."""


def to_unsigned(x: int) -> int:
    """Map a signed integer onto the naturals: 0, -1, 1, -2, 2 ... -> 0, 1, 2, 3, 4 ..."""
    doubled = x << 1
    return doubled if x >= 0 else -doubled - 1


def to_signed(u: int) -> int:
    """Inverse of :func:`to_unsigned`."""
    if u < 0:
        raise ValueError(f"zigzag value must be non-negative, got {u}")
    return (u >> 1) ^ -(u & 1)