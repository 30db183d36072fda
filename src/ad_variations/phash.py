"""
Perceptual-hash helpers.

Stored hashes are hex strings of any length (usually 16 digits = 64 bits).
`hamming_distance` returns math.inf for anything that is not comparable, so a
finite threshold never matches it.
"""
from __future__ import annotations
import math
import re
from typing import Optional, Union

import imagehash
import numpy as np
from PIL import Image

from . import config

_HEX_PREFIX = re.compile(r"^0[xX]")
_NON_HEX    = re.compile(r"[^0-9a-fA-F]")
_SHIFTS     = np.array([3, 2, 1, 0], dtype=np.uint8)

HASH_SIZE = 8   # 8x8 average hash → 16 hex digits


def normalize_hex(value) -> Optional[str]:
    if not isinstance(value, str):
        return None
    s = _HEX_PREFIX.sub("", value.strip())
    s = _NON_HEX.sub("", s).lower()
    return s or None


def hex_to_bit_array(hex_str: str, target_bits: Optional[int] = None) -> np.ndarray:
    """Expand each nibble to 4 bits, MSB first; left-pad with zeros up to target_bits."""
    nibbles = np.array([int(c, 16) for c in hex_str], dtype=np.uint8)
    bits = ((nibbles[:, None] >> _SHIFTS) & 1).ravel()
    if target_bits is not None and bits.size < target_bits:
        bits = np.concatenate([np.zeros(target_bits - bits.size, dtype=np.uint8), bits])
    return bits


def hamming_distance(a, b, symmetric: Optional[bool] = None) -> Union[int, float]:
    """
    Count differing bits between two hex hashes.

    By default `a` sets the width: `b` is left-padded to it and only its
    leading len(a) bits are compared, so a longer `b` is truncated and the
    result can differ from hamming_distance(b, a). With symmetric=True both
    sides are padded to the wider of the two.
    """
    if symmetric is None:
        symmetric = config.HAMMING_SYMMETRIC

    na, nb = normalize_hex(a), normalize_hex(b)
    if not na or not nb:
        return math.inf

    if symmetric:
        width = 4 * max(len(na), len(nb))
        bits_a = hex_to_bit_array(na, width)
        bits_b = hex_to_bit_array(nb, width)
    else:
        bits_a = hex_to_bit_array(na)
        bits_b = hex_to_bit_array(nb, bits_a.size)[: bits_a.size]

    return int(np.count_nonzero(bits_a != bits_b))


def creative_hash(img: Image.Image) -> str:
    """8x8 average hash of a creative, as stored in ads.creative_hash."""
    return str(imagehash.average_hash(img.convert("RGB"), hash_size=HASH_SIZE))
