"""Quality metrics for placeholder evaluation."""

import numpy as np
from PIL import Image


def _mse(original: np.ndarray, reconstructed: np.ndarray) -> float:
    if original.shape != reconstructed.shape:
        raise ValueError(f"Shape mismatch: {original.shape} vs {reconstructed.shape}")
    diff = original.astype(np.float64) - reconstructed.astype(np.float64)
    return float(np.mean(diff ** 2))


def calculate_rmse(original: np.ndarray, reconstructed: np.ndarray) -> float:
    """
    Calculate Root Mean Squared Error (RMSE) in 8-bit code values.

    Args:
        original: Original image
        reconstructed: Reconstructed image (same shape)

    Returns:
        RMSE value

    Raises:
        ValueError: If the shapes differ
    """
    return float(np.sqrt(_mse(original, reconstructed)))


def calculate_psnr(original: np.ndarray, reconstructed: np.ndarray,
                   bit_depth: int = 8) -> float:
    """
    Calculate Peak Signal-to-Noise Ratio (PSNR).

    PSNR = 10 * log10(MAX^2 / MSE), MAX = 2^bit_depth - 1

    Returns:
        PSNR in dB, inf for identical images

    Raises:
        ValueError: If the shapes differ
    """
    max_val = (1 << bit_depth) - 1
    mse = _mse(original, reconstructed)

    if mse == 0:
        return float('inf')

    return float(10 * np.log10((max_val ** 2) / mse))


def placeholder_psnr(source: np.ndarray, placeholder: np.ndarray) -> float:
    """
    PSNR of a decoded placeholder against its source image.

    The source is scaled to the placeholder's size (bilinear) first, since
    placeholders are always rendered with a 32-pixel long side.

    Args:
        source: h x w x 4 uint8 image that was encoded
        placeholder: Decoded h' x w' x 4 uint8 placeholder

    Returns:
        PSNR in dB over all four channels
    """
    ph, pw = placeholder.shape[:2]
    resized = Image.fromarray(np.ascontiguousarray(source, dtype=np.uint8)).resize(
        (pw, ph), Image.BILINEAR)
    return calculate_psnr(np.asarray(resized), placeholder)


def calculate_bpp(hash_size: int, image_shape: tuple) -> float:
    """
    Calculate Bits Per Pixel (BPP) of a hash relative to its source image.

    Args:
        hash_size: Size of the hash in bytes
        image_shape: Tuple of (height, width, ...)
    """
    num_pixels = image_shape[0] * image_shape[1]
    return (hash_size * 8) / num_pixels


def calculate_compression_ratio(original_size: int, compressed_size: int) -> float:
    """Compression ratio (original / compressed); inf for an empty payload."""
    if compressed_size == 0:
        return float('inf')
    return original_size / compressed_size
