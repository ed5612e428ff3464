"""Subnet mask validation and application.

Masks are handled as raw 4-byte values. A mask is valid when its bits are a
run of ones followed only by zeros, so ``255.255.254.0`` passes while
``255.0.255.0`` does not.
"""

from __future__ import annotations

# One to eight leading one-bits followed by zeros.
CONTIGUOUS_PATTERNS = frozenset({0x80, 0xC0, 0xE0, 0xF0, 0xF8, 0xFC, 0xFE, 0xFF})


def verify_contiguous_mask(mask: bytes) -> bool:
    """Return True if ``mask`` is a contiguous-prefix netmask.

    The scan walks bytes left to right: ``0xFF`` continues the ones region,
    ``0x00`` or a partial pattern ends it, and every byte after the end must
    be zero. Invalid masks yield False rather than an exception.
    """
    index = 0
    for index, byte in enumerate(mask):
        if byte == 0xFF:
            continue
        if byte == 0x00 or byte in CONTIGUOUS_PATTERNS:
            break
        return False
    else:
        return True

    return all(byte == 0x00 for byte in mask[index + 1 :])


def apply_subnet_mask(address: bytes, mask: bytes) -> bytes | None:
    """AND ``address`` with ``mask``.

    Returns None when the mask is not contiguous, so callers can tell
    "masking not applicable" apart from a result that masked to zero.
    """
    if len(address) != len(mask):
        raise ValueError(
            f"Address and mask length differ: {len(address)} != {len(mask)} bytes"
        )
    if not verify_contiguous_mask(mask):
        return None
    return bytes(a & m for a, m in zip(address, mask))
