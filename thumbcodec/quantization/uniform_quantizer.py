"""Uniform quantizers for ThumbHash header fields and AC nibbles."""

import numpy as np


def round_half_away(value):
    """
    Round to the nearest integer, ties away from zero.

    Python's built-in round() uses banker's rounding, which would change
    header bytes for values such as 31.5 + 31.5 * 0.0.

    Args:
        value: Scalar or numpy array

    Returns:
        int for scalars, int64 array for arrays
    """
    if np.ndim(value) == 0:
        v = float(value)
        return int(np.floor(abs(v) + 0.5)) * (1 if v >= 0 else -1)

    arr = np.asarray(value, dtype=np.float64)
    return (np.sign(arr) * np.floor(np.abs(arr) + 0.5)).astype(np.int64)


def quantize_unit(value: float, bits: int) -> int:
    """
    Quantize a value in [0, 1] to an unsigned integer of the given width.

    Args:
        value: Value in [0, 1]
        bits: Target bit width

    Returns:
        Integer in [0, 2^bits - 1]
    """
    levels = (1 << bits) - 1
    return round_half_away(levels * value) & levels


def dequantize_unit(code: int, bits: int) -> float:
    """Inverse of quantize_unit."""
    return code / ((1 << bits) - 1)


def quantize_signed(value: float, bits: int) -> int:
    """
    Quantize a value in [-1, 1] to an unsigned integer of the given width.

    For 6 bits: -1 → 0, 0 → 32, 1 → 63 (31.5 + 31.5 * value).

    Args:
        value: Value in [-1, 1]
        bits: Target bit width

    Returns:
        Integer in [0, 2^bits - 1]
    """
    levels = (1 << bits) - 1
    half = levels / 2
    return round_half_away(half + half * value) & levels


def dequantize_signed(code: int, bits: int) -> float:
    """Inverse of quantize_signed: code / 31.5 - 1 for 6 bits."""
    half = ((1 << bits) - 1) / 2
    return code / half - 1


def quantize_ac(normalized: np.ndarray, bits: int = 4) -> np.ndarray:
    """
    Quantize normalized AC coefficients (in [0, 1]) to nibbles.

    Args:
        normalized: Normalized AC values
        bits: Bits per coefficient (default: 4)

    Returns:
        uint8 array of codes
    """
    levels = (1 << bits) - 1
    return (round_half_away(levels * np.asarray(normalized, dtype=np.float64)) & levels).astype(np.uint8)


def dequantize_ac(codes: np.ndarray, scale: float, bits: int = 4) -> np.ndarray:
    """
    Dequantize AC nibbles back to signed coefficients.

    (code / 7.5 - 1) * scale for 4-bit codes.

    Args:
        codes: Quantized codes
        scale: Channel AC scale (after any decode-side boost)
        bits: Bits per coefficient (default: 4)

    Returns:
        float64 array of coefficients
    """
    half = ((1 << bits) - 1) / 2
    return (np.asarray(codes, dtype=np.float64) / half - 1.0) * scale
