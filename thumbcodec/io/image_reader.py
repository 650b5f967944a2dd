"""Image reader producing RGBA buffers sized for the encoder."""

from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image

from ..constants import MAX_INPUT_SIZE


def fit_size(width: int, height: int, max_size: int = MAX_INPUT_SIZE) -> Tuple[int, int]:
    """
    Compute the size an image is resized to so it fits the encoder limit.

    Images already within max_size x max_size keep their size. Larger ones
    are scaled so the long side becomes max_size and the short side is
    floored, keeping at least one pixel.

    Args:
        width: Original width
        height: Original height
        max_size: Largest allowed side (default: 100)

    Returns:
        (width, height) after fitting
    """
    if width <= max_size and height <= max_size:
        return width, height

    longest = max(width, height)
    return (max(1, width * max_size // longest),
            max(1, height * max_size // longest))


def to_rgba_array(image: Image.Image, max_size: int = MAX_INPUT_SIZE) -> np.ndarray:
    """
    Convert a PIL image to an h x w x 4 uint8 array within the size limit.

    Args:
        image: Any PIL image
        max_size: Largest allowed side (default: 100)

    Returns:
        h x w x 4 uint8 array with straight alpha
    """
    image = image.convert('RGBA')
    size = fit_size(image.width, image.height, max_size)
    if size != (image.width, image.height):
        image = image.resize(size, Image.BILINEAR)
    return np.asarray(image, dtype=np.uint8)


def read_image_rgba(path: str, max_size: int = MAX_INPUT_SIZE) -> Tuple[int, int, bytes]:
    """
    Read an image file as an RGBA buffer ready for encoding.

    Args:
        path: Path to any Pillow-readable image
        max_size: Largest allowed side (default: 100)

    Returns:
        (width, height, rgba) with rgba of length width * height * 4

    Raises:
        ValueError: If the file cannot be read as an image
    """
    path = Path(path)

    try:
        with Image.open(path) as image:
            rgba = to_rgba_array(image, max_size)
    except OSError as e:
        raise ValueError(f"Cannot read image {path}: {e}") from e

    height, width = rgba.shape[:2]
    return width, height, rgba.tobytes()
