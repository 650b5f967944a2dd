"""Truncated DCT over a triangular set of frequencies."""

from typing import List, Tuple

import numpy as np


def triangular_indices(nx: int, ny: int) -> List[Tuple[int, int]]:
    """
    List the (cx, cy) frequencies kept for an nx x ny grid, in scan order.

    A frequency is kept while cx * ny < nx * (ny - cy), which keeps the
    low-frequency triangle in the top-left corner of the grid. Rows (cy) are
    the outer loop, columns (cx) the inner one. (0, 0) is the DC term and
    always comes first.

    Args:
        nx: Horizontal grid size
        ny: Vertical grid size

    Returns:
        List of (cx, cy) tuples
    """
    indices = []
    for cy in range(ny):
        cx = 0
        while cx * ny < nx * (ny - cy):
            indices.append((cx, cy))
            cx += 1
    return indices


def count_ac(nx: int, ny: int) -> int:
    """Number of AC coefficients for an nx x ny grid."""
    return len(triangular_indices(nx, ny)) - 1


def cosine_table(size: int, n_freqs: int) -> np.ndarray:
    """
    Generate the DCT-II cosine table for one axis.

    table[i, k] = cos(pi / size * k * (i + 0.5))

    The table is unnormalized: the forward transform divides by the pixel
    count and the inverse transform doubles every AC term.

    Args:
        size: Number of samples (pixels) along the axis
        n_freqs: Number of frequencies

    Returns:
        size x n_freqs table
    """
    if size == 0:
        return np.zeros((0, n_freqs))

    i = np.arange(size, dtype=np.float64) + 0.5
    k = np.arange(n_freqs, dtype=np.float64)
    return np.cos(np.outer(np.pi / size * i, k))


def forward_dct_channel(channel: np.ndarray, nx: int, ny: int) -> Tuple[float, np.ndarray]:
    """
    Forward DCT of one channel plane, restricted to the triangular set.

    Formula: F(cx, cy) = sum(channel * fx[cx] * fy[cy]) / (w * h)

    Args:
        channel: h x w float plane
        nx: Horizontal grid size
        ny: Vertical grid size

    Returns:
        Tuple of (dc, ac) where ac is a float64 array in scan order
    """
    h, w = channel.shape
    fx = cosine_table(w, nx)
    fy = cosine_table(h, ny)

    grid = fy.T @ channel @ fx / (w * h)

    coeffs = np.array([grid[cy, cx] for cx, cy in triangular_indices(nx, ny)])
    return float(coeffs[0]), coeffs[1:]


def inverse_dct_channel(dc: float, ac: np.ndarray, nx: int, ny: int,
                        fx: np.ndarray, fy: np.ndarray) -> np.ndarray:
    """
    Inverse DCT of one channel as a direct weighted sum.

    value(x, y) = dc + sum(ac[j] * fx[x, cx] * fy[y, cy] * 2)

    The cosine tables are built once by the caller and shared by every
    channel; they may have more columns than this channel's grid uses.

    Args:
        dc: DC term
        ac: AC terms in scan order
        nx: Horizontal grid size
        ny: Vertical grid size
        fx: w x (>= nx) cosine table
        fy: h x (>= ny) cosine table

    Returns:
        h x w reconstructed plane
    """
    grid = np.zeros((ny, nx))
    for (cx, cy), value in zip(triangular_indices(nx, ny)[1:], ac):
        grid[cy, cx] = 2.0 * value

    return dc + fy[:, :ny] @ grid @ fx[:, :nx].T
