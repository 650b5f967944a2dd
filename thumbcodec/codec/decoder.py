"""ThumbHash Decoder - Integrates all decoding stages."""

import math
import numpy as np
from typing import Tuple

from ..constants import (
    HEADER_SIZE, OUTPUT_LONG_SIDE, MIN_GRID_SIZE,
    L_LIMIT_OPAQUE, L_LIMIT_ALPHA, PQ_GRID, A_GRID, AC_BITS, SATURATION_BOOST,
    L_DC_BITS, P_DC_BITS, Q_DC_BITS, L_SCALE_BITS,
    P_SCALE_BITS, Q_SCALE_BITS, A_DC_BITS, A_SCALE_BITS,
)
from ..io.bitstream import HashReader, HashTooShortError, unpack_header
from ..io.image_writer import rgba_to_data_url
from ..transform import count_ac, cosine_table, inverse_dct_channel, lpq_to_rgb
from ..quantization import round_half_away, dequantize_unit, dequantize_signed, dequantize_ac


def thumb_hash_to_approximate_aspect_ratio(hash_bytes: bytes) -> float:
    """
    Extract the approximate aspect ratio (width / height) of the original image.

    Only the alpha flag, the landscape flag and the 3-bit limit are read.

    Raises:
        HashTooShortError: If fewer than 5 bytes are available
    """
    if len(hash_bytes) < HEADER_SIZE:
        raise HashTooShortError("hash is too short")

    has_alpha = (hash_bytes[2] & 0x80) != 0
    l_max = L_LIMIT_ALPHA if has_alpha else L_LIMIT_OPAQUE
    l_min = hash_bytes[3] & 7
    is_landscape = (hash_bytes[4] & 0x80) != 0

    lx = l_max if is_landscape else l_min
    ly = l_min if is_landscape else l_max
    if ly == 0:
        # Only reachable with a corrupt limit field
        return math.inf
    return lx / ly


def thumb_hash_to_average_rgba(hash_bytes: bytes) -> Tuple[float, float, float, float]:
    """
    Extract the average color from a hash without decoding the image.

    Returns:
        (r, g, b, a) each in [0, 1], straight alpha

    Raises:
        HashTooShortError: If fewer than 5 bytes are available, or fewer than
            6 when the alpha flag is set
    """
    header = unpack_header(hash_bytes)

    l = dequantize_unit(header['l_dc'], L_DC_BITS)  # noqa: E741
    p = dequantize_signed(header['p_dc'], P_DC_BITS)
    q = dequantize_signed(header['q_dc'], Q_DC_BITS)
    a = dequantize_unit(header['a_dc'], A_DC_BITS) if header['has_alpha'] else 1.0

    r, g, b = lpq_to_rgb(l, p, q)
    return (min(max(r, 0.0), 1.0),
            min(max(g, 0.0), 1.0),
            min(max(b, 0.0), 1.0),
            a)


def output_size(ratio: float) -> Tuple[int, int]:
    """
    Size of the decoded placeholder for an aspect ratio.

    The long side is always 32 pixels.

    Returns:
        (width, height)
    """
    if ratio > 1:
        return OUTPUT_LONG_SIDE, round_half_away(OUTPUT_LONG_SIDE / ratio)
    return round_half_away(OUTPUT_LONG_SIDE * ratio), OUTPUT_LONG_SIDE


class ThumbHashDecoder:
    """
    Decoder for image placeholders.

    Pipeline (reverse of encoder):
    1. Aspect ratio and output size
    2. Unpack and dequantize the header
    3. Read AC nibbles: L, P, Q, then A
    4. Dequantize AC terms (P/Q scales boosted by 1.25)
    5. Inverse DCT on shared cosine tables
    6. L/P/Q back to RGB, clamp, convert to 8 bits
    """

    def decode_array(self, hash_bytes: bytes) -> np.ndarray:
        """
        Decode a hash to an RGBA placeholder image.

        Args:
            hash_bytes: Hash produced by the encoder

        Returns:
            h x w x 4 uint8 array, long side 32 pixels, straight alpha

        Raises:
            HashTooShortError: If the hash ends before a required byte
        """
        hash_bytes = bytes(hash_bytes)

        # Step 1: Output size
        ratio = thumb_hash_to_approximate_aspect_ratio(hash_bytes)
        w, h = output_size(ratio)

        # Step 2: Header
        header = unpack_header(hash_bytes)
        has_alpha = header['has_alpha']
        is_landscape = header['is_landscape']

        l_dc = dequantize_unit(header['l_dc'], L_DC_BITS)
        p_dc = dequantize_signed(header['p_dc'], P_DC_BITS)
        q_dc = dequantize_signed(header['q_dc'], Q_DC_BITS)
        l_scale = dequantize_unit(header['l_scale'], L_SCALE_BITS)
        p_scale = dequantize_unit(header['p_scale'], P_SCALE_BITS)
        q_scale = dequantize_unit(header['q_scale'], Q_SCALE_BITS)

        l_max = L_LIMIT_ALPHA if has_alpha else L_LIMIT_OPAQUE
        lx = max(MIN_GRID_SIZE, l_max if is_landscape else header['l_limit'])
        ly = max(MIN_GRID_SIZE, header['l_limit'] if is_landscape else l_max)

        if has_alpha:
            a_dc = dequantize_unit(header['a_dc'], A_DC_BITS)
            a_scale = dequantize_unit(header['a_scale'], A_SCALE_BITS)
        else:
            a_dc, a_scale = 1.0, 1.0

        # Step 3 & 4: AC terms
        reader = HashReader(hash_bytes, offset=header['header_size'])
        l_ac = dequantize_ac(reader.read_nibbles(count_ac(lx, ly)), l_scale, AC_BITS)
        p_ac = dequantize_ac(reader.read_nibbles(count_ac(*PQ_GRID)),
                             p_scale * SATURATION_BOOST, AC_BITS)
        q_ac = dequantize_ac(reader.read_nibbles(count_ac(*PQ_GRID)),
                             q_scale * SATURATION_BOOST, AC_BITS)
        if has_alpha:
            a_ac = dequantize_ac(reader.read_nibbles(count_ac(*A_GRID)), a_scale, AC_BITS)

        # Step 5: Inverse DCT
        min_cols = A_GRID[0] if has_alpha else PQ_GRID[0]
        fx = cosine_table(w, max(lx, min_cols))
        fy = cosine_table(h, max(ly, min_cols))

        l = inverse_dct_channel(l_dc, l_ac, lx, ly, fx, fy)  # noqa: E741
        p = inverse_dct_channel(p_dc, p_ac, *PQ_GRID, fx, fy)
        q = inverse_dct_channel(q_dc, q_ac, *PQ_GRID, fx, fy)
        if has_alpha:
            a = inverse_dct_channel(a_dc, a_ac, *A_GRID, fx, fy)
        else:
            a = np.full((h, w), a_dc)

        # Step 6: Back to RGBA
        r, g, b = lpq_to_rgb(l, p, q)
        rgba = np.stack([r, g, b, a], axis=-1)
        return (np.clip(rgba, 0.0, 1.0) * 255.0).astype(np.uint8)

    def decode(self, hash_bytes: bytes) -> Tuple[int, int, bytes]:
        """
        Decode a hash to (width, height, rgba).

        rgba holds width * height * 4 bytes, row by row, straight alpha.

        Raises:
            HashTooShortError: If the hash ends before a required byte
        """
        image = self.decode_array(hash_bytes)
        h, w = image.shape[:2]
        return w, h, image.tobytes()


def thumb_hash_to_rgba(hash_bytes: bytes) -> Tuple[int, int, bytes]:
    """Decode a hash to (width, height, rgba). See ThumbHashDecoder.decode."""
    return ThumbHashDecoder().decode(hash_bytes)


def thumb_hash_to_data_url(hash_bytes: bytes) -> str:
    """Decode a hash straight to a PNG data URL for use as an <img> src."""
    w, h, rgba = ThumbHashDecoder().decode(hash_bytes)
    return rgba_to_data_url(w, h, rgba)
