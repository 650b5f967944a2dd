"""ThumbHash Encoder - Integrates all encoding stages."""

import numpy as np
from typing import Tuple

from ..constants import (
    MAX_INPUT_SIZE, MIN_GRID_SIZE, L_LIMIT_OPAQUE, L_LIMIT_ALPHA,
    PQ_GRID, A_GRID, AC_BITS,
    L_DC_BITS, P_DC_BITS, Q_DC_BITS, L_SCALE_BITS,
    P_SCALE_BITS, Q_SCALE_BITS, A_DC_BITS, A_SCALE_BITS,
)
from ..io.bitstream import NibbleWriter, pack_header
from ..transform import average_rgba, rgba_to_lpqa, forward_dct_channel
from ..quantization import round_half_away, quantize_unit, quantize_signed, quantize_ac


def _as_rgba_array(width: int, height: int, rgba) -> np.ndarray:
    """Validate encoder input and view it as an h x w x 4 uint8 array."""
    if not (1 <= width <= MAX_INPUT_SIZE and 1 <= height <= MAX_INPUT_SIZE):
        raise ValueError(f"{width}x{height} doesn't fit in "
                         f"{MAX_INPUT_SIZE}x{MAX_INPUT_SIZE}")

    if isinstance(rgba, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(rgba, dtype=np.uint8)
    else:
        arr = np.asarray(rgba)
        if arr.dtype != np.uint8:
            if arr.size and (arr.min() < 0 or arr.max() > 255):
                raise ValueError("RGBA values must be in [0, 255]")
            arr = arr.astype(np.uint8)

    if arr.size != width * height * 4:
        raise ValueError(f"Expected {width * height * 4} RGBA values, got {arr.size}")

    return arr.reshape(height, width, 4)


def luminance_grid(width: int, height: int, has_alpha: bool) -> Tuple[int, int]:
    """
    Split the luminance budget between the two axes.

    The long axis gets 7 cells (5 when alpha needs room for its own
    coefficients); the short axis gets the proportional share, at least 1.

    Returns:
        (lx, ly)
    """
    l_limit = L_LIMIT_ALPHA if has_alpha else L_LIMIT_OPAQUE
    longest = max(width, height)
    lx = max(1, round_half_away(l_limit * width / longest))
    ly = max(1, round_half_away(l_limit * height / longest))
    return lx, ly


def encode_channel(channel: np.ndarray, nx: int, ny: int) -> Tuple[float, np.ndarray, float]:
    """
    DCT one channel and normalize its AC terms.

    AC terms are mapped to [0, 1] as 0.5 + 0.5 * ac / scale, with scale
    the largest AC magnitude. A channel without AC energy keeps raw zeros.

    Args:
        channel: h x w float plane
        nx: Horizontal grid size
        ny: Vertical grid size

    Returns:
        (dc, normalized_ac, scale)
    """
    dc, ac = forward_dct_channel(channel, nx, ny)
    scale = float(np.abs(ac).max()) if ac.size else 0.0
    if scale > 0:
        ac = 0.5 + 0.5 / scale * ac
    return dc, ac, scale


class ThumbHashEncoder:
    """
    Encoder for image placeholders.

    Pipeline:
    1. Alpha-weighted average color
    2. Composite atop the average color, split into L/P/Q/A planes
    3. Choose the luminance grid from the aspect ratio
    4. Forward DCT over the triangular frequency set per channel
    5. Normalize AC terms by their scale
    6. Quantize and pack the header
    7. Pack AC terms as nibbles: L, P, Q, then A
    """

    def encode(self, width: int, height: int, rgba) -> bytes:
        """
        Encode an RGBA image.

        Args:
            width: Image width (1-100)
            height: Image height (1-100)
            rgba: width * height * 4 straight-alpha RGBA values, row by row
                  (bytes, sequence of ints or uint8 array)

        Returns:
            Hash bytes

        Raises:
            ValueError: If the size or buffer length breaks the input contract
        """
        pixels = _as_rgba_array(width, height, rgba)

        # Step 1: Average color
        avg_r, avg_g, avg_b, total_alpha = average_rgba(pixels)
        has_alpha = total_alpha < width * height

        # Step 2: Color planes
        l, p, q, a = rgba_to_lpqa(pixels, (avg_r, avg_g, avg_b))  # noqa: E741

        # Step 3: Luminance grid
        lx, ly = luminance_grid(width, height, has_alpha)

        # Step 4 & 5: DCT and normalize
        l_dc, l_ac, l_scale = encode_channel(l, max(lx, MIN_GRID_SIZE), max(ly, MIN_GRID_SIZE))
        p_dc, p_ac, p_scale = encode_channel(p, *PQ_GRID)
        q_dc, q_ac, q_scale = encode_channel(q, *PQ_GRID)
        if has_alpha:
            a_dc, a_ac, a_scale = encode_channel(a, *A_GRID)
        else:
            a_dc, a_ac, a_scale = 1.0, np.zeros(0), 1.0

        # Step 6: Header
        is_landscape = width > height
        header = pack_header(
            l_dc=quantize_unit(l_dc, L_DC_BITS),
            p_dc=quantize_signed(p_dc, P_DC_BITS),
            q_dc=quantize_signed(q_dc, Q_DC_BITS),
            l_scale=quantize_unit(l_scale, L_SCALE_BITS),
            has_alpha=has_alpha,
            l_limit=ly if is_landscape else lx,
            p_scale=quantize_unit(p_scale, P_SCALE_BITS),
            q_scale=quantize_unit(q_scale, Q_SCALE_BITS),
            is_landscape=is_landscape,
            a_dc=quantize_unit(a_dc, A_DC_BITS),
            a_scale=quantize_unit(a_scale, A_SCALE_BITS),
        )

        # Step 7: AC nibbles
        buffer = bytearray(header)
        writer = NibbleWriter(buffer)
        for ac in (l_ac, p_ac, q_ac, a_ac):
            writer.write_nibbles(quantize_ac(ac, AC_BITS))
        writer.flush()

        return bytes(buffer)


def rgba_to_thumb_hash(width: int, height: int, rgba) -> bytes:
    """Encode an RGBA image to a hash. See ThumbHashEncoder.encode."""
    return ThumbHashEncoder().encode(width, height, rgba)
