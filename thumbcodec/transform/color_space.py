"""RGBA <-> LPQA conversion.

L is luminance, P is yellow - blue and Q is red - green. The projection is
linear so it can be inverted exactly on decode.
"""

from typing import Tuple

import numpy as np


def average_rgba(rgba: np.ndarray) -> Tuple[float, float, float, float]:
    """
    Alpha-weighted average color of an image.

    Fully transparent pixels contribute nothing. If every pixel is fully
    transparent the average color is black.

    Args:
        rgba: (..., 4) uint8 array

    Returns:
        (avg_r, avg_g, avg_b, total_alpha), colors in [0, 1] and total_alpha
        as the sum of per-pixel alpha in [0, 1]
    """
    px = rgba.reshape(-1, 4).astype(np.float64) / 255.0
    alpha = px[:, 3]
    total_alpha = float(alpha.sum())

    weighted = (px[:, :3] * alpha[:, None]).sum(axis=0)
    if total_alpha > 0:
        weighted /= total_alpha

    return float(weighted[0]), float(weighted[1]), float(weighted[2]), total_alpha


def rgba_to_lpqa(rgba: np.ndarray, average: Tuple[float, float, float]
                 ) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Composite an image atop its average color and split it into L/P/Q/A.

    Args:
        rgba: h x w x 4 uint8 array
        average: (avg_r, avg_g, avg_b) in [0, 1]

    Returns:
        Tuple of four h x w float64 planes (l, p, q, a)
    """
    px = rgba.astype(np.float64) / 255.0
    alpha = px[..., 3]
    bg = np.asarray(average, dtype=np.float64)

    rgb = bg * (1.0 - alpha[..., None]) + alpha[..., None] * px[..., :3]
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]

    l = (r + g + b) / 3.0  # noqa: E741
    p = (r + g) / 2.0 - b
    q = r - g
    return l, p, q, alpha


def lpq_to_rgb(l, p, q):
    """
    Invert the L/P/Q projection.

    b = l - 2/3 p
    r = (3l - b + q) / 2
    g = r - q

    Works on scalars and numpy arrays alike. Results are not clamped.
    """
    b = l - 2.0 / 3.0 * p
    r = (3.0 * l - b + q) / 2.0
    g = r - q
    return r, g, b
