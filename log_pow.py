"""
Integer log/pow helpers used to size sparse table levels.

Both functions are O(1): they work on the bit length of the argument
rather than looping or going through floating point.
"""


def lower_log2(n: int) -> int:
    """
    Largest k such that 2^k <= n.

    Args:
        n: Positive integer

    Returns:
        floor(log2(n))

    Raises:
        ValueError: if n < 1 (log of zero is undefined)
    """
    if n < 1:
        raise ValueError(f"lower_log2 is undefined for n={n}")
    return n.bit_length() - 1


def pow2(k: int) -> int:
    """Return 2^k for k >= 0."""
    if k < 0:
        raise ValueError(f"pow2 requires a non-negative exponent, got {k}")
    return 1 << k
