from __future__ import annotations

"""
Stable string hashing for per-project storage keys.
"""

_DJB2_SEED = 5381
_UINT32_MASK = 0xFFFFFFFF


def hash_string(value: str) -> str:
    """
    Hash a string with djb2 and return it as lowercase hex.

    The accumulator is kept to unsigned 32 bits.

    Args:
        value: Text to hash, typically a project directory path.

    Returns:
        str: Hex digest, at most 8 characters.
    """
    h = _DJB2_SEED
    for ch in value:
        h = ((h << 5) + h + ord(ch)) & _UINT32_MASK
    return format(h, "x")
