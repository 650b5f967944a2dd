"""Placeholder image writer supporting PNG and NumPy formats."""

import base64
import io

import numpy as np
from pathlib import Path
from PIL import Image


def write_image(image: np.ndarray, path: str, format: str = None) -> Path:
    """
    Write a decoded RGBA placeholder to file.

    Args:
        image: h x w x 4 uint8 array
        path: Output file path
        format: Output format ('png' or 'npy'). Auto-detected from extension if None.

    Returns:
        Path actually written. An unknown extension is replaced by '.png'.

    Raises:
        ValueError: If format is unsupported or the array is not RGBA
    """
    path = Path(path)

    # Auto-detect format from extension
    if format is None:
        suffix = path.suffix.lower()
        if suffix == '.npy':
            format = 'npy'
        elif suffix == '.png':
            format = 'png'
        else:
            # Default to png
            format = 'png'
            path = path.with_suffix('.png')

    _check_rgba(image)

    if format == 'png':
        _write_png(image, path)
    elif format == 'npy':
        _write_numpy(image, path)
    else:
        raise ValueError(f"Unsupported format: {format}")

    return path


def rgba_to_data_url(width: int, height: int, rgba) -> str:
    """
    Render an RGBA buffer as a 'data:image/png;base64,...' URL.

    Args:
        width: Image width
        height: Image height
        rgba: width * height * 4 bytes or an h x w x 4 uint8 array

    Returns:
        PNG data URL, usable directly as an <img> src
    """
    if isinstance(rgba, (bytes, bytearray, memoryview)):
        image = np.frombuffer(rgba, dtype=np.uint8)
    else:
        image = np.asarray(rgba, dtype=np.uint8)
    if image.size != width * height * 4:
        raise ValueError(f"Expected {width * height * 4} RGBA values, got {image.size}")
    image = image.reshape(height, width, 4)

    buffer = io.BytesIO()
    _to_pil(image).save(buffer, 'PNG')
    return 'data:image/png;base64,' + base64.b64encode(buffer.getvalue()).decode('ascii')


def _check_rgba(image: np.ndarray) -> None:
    if image.ndim != 3 or image.shape[2] != 4:
        raise ValueError(f"Expected h x w x 4 array, got shape {image.shape}")


def _to_pil(image: np.ndarray) -> Image.Image:
    return Image.fromarray(np.ascontiguousarray(image, dtype=np.uint8))


def _write_png(image: np.ndarray, path: Path) -> None:
    """Write image as PNG."""
    _to_pil(image).save(path, 'PNG')


def _write_numpy(image: np.ndarray, path: Path) -> None:
    """Write image as NumPy array."""
    np.save(str(path), image)
