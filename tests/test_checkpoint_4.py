"""Checkpoint 4: Decoder Verification."""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import math
import numpy as np
import pytest
import thumbcodec
from thumbcodec.codec import (
    ThumbHashEncoder, ThumbHashDecoder,
    thumb_hash_to_average_rgba, thumb_hash_to_approximate_aspect_ratio,
)
from thumbcodec.codec.decoder import output_size
from thumbcodec.io import HashTooShortError, pack_header, unpack_header
from _runner import run_checkpoint


def solid_image(width, height, color):
    """Create a width x height image filled with one RGBA color."""
    return np.tile(np.array(color, dtype=np.uint8), (height, width, 1))


def test_too_short():
    """Test the length floor of every decode-family function."""
    print("=" * 60)
    print("Test 1: Too-Short Hashes")
    print("=" * 60)

    decoder = ThumbHashDecoder()
    for length in range(5):
        data = bytes(length)
        with pytest.raises(HashTooShortError):
            decoder.decode(data)
        with pytest.raises(HashTooShortError):
            thumb_hash_to_average_rgba(data)
        with pytest.raises(HashTooShortError):
            thumb_hash_to_approximate_aspect_ratio(data)
    print("   ✓ Fewer than 5 bytes rejected by all three functions")

    alpha_flag = bytes([0, 0, 0x80, 0, 0])
    with pytest.raises(HashTooShortError):
        decoder.decode(alpha_flag)
    with pytest.raises(HashTooShortError):
        thumb_hash_to_average_rgba(alpha_flag)
    assert thumb_hash_to_approximate_aspect_ratio(alpha_flag) == 0.0
    print("   ✓ 5 bytes with the alpha flag: decode and average color rejected")

    rng = np.random.default_rng(3)
    pixels = rng.integers(0, 256, (10, 10, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    hash_bytes = ThumbHashEncoder().encode(10, 10, pixels)
    for cut in range(5, len(hash_bytes)):
        with pytest.raises(HashTooShortError):
            decoder.decode(hash_bytes[:cut])
    print("   ✓ Any truncation of the AC bytes rejected")

    assert issubclass(HashTooShortError, ValueError)
    print("✅ Too-short hash test passed")


def test_average_color():
    """Test average color recovery for a solid image."""
    print("\n" + "=" * 60)
    print("Test 2: Average Color Accuracy")
    print("=" * 60)

    hash_bytes = ThumbHashEncoder().encode(16, 16, solid_image(16, 16, (200, 100, 50, 255)))
    r, g, b, a = thumb_hash_to_average_rgba(hash_bytes)
    recovered = [round(v * 255) for v in (r, g, b, a)]

    print(f"   Recovered: {recovered}")
    for got, want in zip(recovered, (200, 100, 50, 255)):
        assert abs(got - want) <= 2, f"{recovered} too far from (200, 100, 50, 255)"
    print("   ✓ Within ±2 per channel")

    for v in (r, g, b, a):
        assert 0.0 <= v <= 1.0

    clear = ThumbHashEncoder().encode(1, 1, bytes([0, 0, 0, 0]))
    assert thumb_hash_to_average_rgba(clear)[3] == 0.0
    print("   ✓ Transparent image averages to alpha 0")

    # Extreme DC values are clamped
    header = bytes([63, 0, 0, 0, 0])
    r, g, b, a = thumb_hash_to_average_rgba(header)
    assert all(0.0 <= v <= 1.0 for v in (r, g, b))
    assert a == 1.0
    print("✅ Average color test passed")


def test_aspect_ratio_agreement():
    """Test that the aspect ratio matches the header and the output size."""
    print("\n" + "=" * 60)
    print("Test 3: Aspect Ratio Agreement")
    print("=" * 60)

    encoder = ThumbHashEncoder()
    decoder = ThumbHashDecoder()
    rng = np.random.default_rng(7)

    sizes = [(100, 50), (50, 100), (20, 20), (100, 1), (1, 100), (64, 48), (13, 97)]
    for w, h in sizes:
        for alpha in (255, 128):
            pixels = rng.integers(0, 256, (h, w, 4), dtype=np.uint8)
            pixels[..., 3] = alpha
            hash_bytes = encoder.encode(w, h, pixels)

            header = unpack_header(hash_bytes)
            l_max = 5 if header['has_alpha'] else 7
            if header['is_landscape']:
                lx, ly = l_max, header['l_limit']
            else:
                lx, ly = header['l_limit'], l_max

            ratio = thumb_hash_to_approximate_aspect_ratio(hash_bytes)
            assert ratio == pytest.approx(lx / ly)

            out_w, out_h, rgba = decoder.decode(hash_bytes)
            assert (out_w, out_h) == output_size(ratio)
            assert len(rgba) == out_w * out_h * 4
            assert max(out_w, out_h) == 32
            print(f"   ✓ {w}x{h} alpha={alpha}: ratio {ratio:.3f} → {out_w}x{out_h}")

    print("✅ Aspect ratio agreement test passed")


def test_orientation():
    """Test decoded sizes for landscape, portrait and square images."""
    print("\n" + "=" * 60)
    print("Test 4: Decoded Orientation")
    print("=" * 60)

    encoder = ThumbHashEncoder()
    decoder = ThumbHashDecoder()
    red = (255, 0, 0, 255)

    w, h, _ = decoder.decode(encoder.encode(100, 50, solid_image(100, 50, red)))
    assert (w, h) == (32, 18), f"Got {w}x{h}"  # 32 / (7 / 4) = 18.3
    print(f"   ✓ 100x50 → {w}x{h}")

    w, h, _ = decoder.decode(encoder.encode(50, 100, solid_image(50, 100, red)))
    assert (w, h) == (18, 32), f"Got {w}x{h}"
    print(f"   ✓ 50x100 → {w}x{h}")

    w, h, _ = decoder.decode(encoder.encode(20, 20, solid_image(20, 20, red)))
    assert (w, h) == (32, 32)
    print(f"   ✓ 20x20 → {w}x{h}")

    assert output_size(math.inf) == (32, 0)
    assert output_size(0.0) == (0, 32)
    print("✅ Orientation test passed")


def test_solid_color_image():
    """Test that a solid image decodes to a flat placeholder."""
    print("\n" + "=" * 60)
    print("Test 5: Solid Color Placeholder")
    print("=" * 60)

    hash_bytes = ThumbHashEncoder().encode(16, 16, solid_image(16, 16, (200, 100, 50, 255)))
    image = ThumbHashDecoder().decode_array(hash_bytes)

    assert image.dtype == np.uint8
    assert image.shape == (32, 32, 4)
    assert np.all(image[..., 3] == 255)

    spread = image.reshape(-1, 4).max(axis=0).astype(int) - image.reshape(-1, 4).min(axis=0)
    assert spread.max() <= 1, f"Placeholder not flat: spread {spread}"

    mean = image.reshape(-1, 4).mean(axis=0)
    for got, want in zip(mean[:3], (200, 100, 50)):
        assert abs(got - want) <= 3, f"Mean color {mean} too far from (200, 100, 50)"
    print(f"   ✓ Mean color {mean.round(1).tolist()}")
    print("✅ Solid color placeholder test passed")


def test_structure_preserved():
    """Test that coarse structure survives the round trip."""
    print("\n" + "=" * 60)
    print("Test 6: Coarse Structure")
    print("=" * 60)

    encoder = ThumbHashEncoder()
    decoder = ThumbHashDecoder()

    # Horizontal gray ramp, dark on the left
    ramp = np.zeros((32, 32, 4), dtype=np.uint8)
    ramp[..., :3] = np.linspace(0, 255, 32).astype(np.uint8)[None, :, None]
    ramp[..., 3] = 255
    image = decoder.decode_array(encoder.encode(32, 32, ramp))
    left = image[:, :8, :3].mean()
    right = image[:, -8:, :3].mean()
    assert left + 100 < right, f"Ramp lost: left {left:.1f}, right {right:.1f}"
    print(f"   ✓ Ramp: left {left:.1f} < right {right:.1f}")

    # Left half opaque, right half transparent
    half = solid_image(20, 10, (0, 128, 255, 255))
    half[:, 10:, 3] = 0
    hash_bytes = encoder.encode(20, 10, half)
    assert hash_bytes[2] & 0x80
    image = decoder.decode_array(hash_bytes)
    left_alpha = image[:, :6, 3].mean()
    right_alpha = image[:, -6:, 3].mean()
    assert left_alpha > 128 > right_alpha, f"Alpha lost: {left_alpha:.1f} / {right_alpha:.1f}"
    print(f"   ✓ Alpha: left {left_alpha:.1f}, right {right_alpha:.1f}")

    # Fully transparent decodes to alpha 0
    image = decoder.decode_array(encoder.encode(1, 1, bytes([9, 9, 9, 0])))
    assert np.all(image[..., 3] == 0)
    print("   ✓ Fully transparent → alpha 0 everywhere")
    print("✅ Coarse structure test passed")


def test_determinism_and_api():
    """Test repeatable decoding and the top-level functions."""
    print("\n" + "=" * 60)
    print("Test 7: Determinism and Public API")
    print("=" * 60)

    rng = np.random.default_rng(11)
    pixels = rng.integers(0, 256, (25, 40, 4), dtype=np.uint8)

    hash_bytes = thumbcodec.encode(40, 25, pixels)
    assert hash_bytes == thumbcodec.encode(40, 25, pixels)

    first = thumbcodec.decode(hash_bytes)
    second = thumbcodec.decode(bytearray(hash_bytes))
    assert first == second
    assert isinstance(first[2], bytes)
    print("   ✓ Decoding is deterministic")

    assert thumbcodec.aspect_ratio(hash_bytes) == thumb_hash_to_approximate_aspect_ratio(hash_bytes)
    assert thumbcodec.average_color(hash_bytes) == thumb_hash_to_average_rgba(hash_bytes)

    w, h, rgba = first
    array = ThumbHashDecoder().decode_array(hash_bytes)
    assert array.shape == (h, w, 4)
    assert array.tobytes() == rgba
    print("   ✓ decode() and decode_array() agree")

    # Trailing bytes past the AC data are ignored
    assert thumbcodec.decode(hash_bytes + b'\x00') == first
    print("✅ Determinism and API test passed")


def reference_decode(hash_bytes):
    """Decode a hash pixel by pixel with plain loops and math.cos."""
    header24 = hash_bytes[0] | (hash_bytes[1] << 8) | (hash_bytes[2] << 16)
    header16 = hash_bytes[3] | (hash_bytes[4] << 8)
    l_dc = (header24 & 63) / 63
    p_dc = ((header24 >> 6) & 63) / 31.5 - 1
    q_dc = ((header24 >> 12) & 63) / 31.5 - 1
    l_scale = ((header24 >> 18) & 31) / 31
    has_alpha = (header24 >> 23) != 0
    p_scale = ((header16 >> 3) & 63) / 63
    q_scale = ((header16 >> 9) & 63) / 63
    is_landscape = (header16 >> 15) != 0
    l_max = 5 if has_alpha else 7
    lx = max(3, l_max if is_landscape else header16 & 7)
    ly = max(3, header16 & 7 if is_landscape else l_max)
    if has_alpha:
        a_dc, a_scale = (hash_bytes[5] & 15) / 15, (hash_bytes[5] >> 4) / 15
    else:
        a_dc, a_scale = 1.0, 1.0

    start = 6 if has_alpha else 5
    position = 0

    def read_channel(nx, ny, scale):
        nonlocal position
        terms = []
        for cy in range(ny):
            cx = 1 if cy == 0 else 0
            while cx * ny < nx * (ny - cy):
                nibble = (hash_bytes[start + position // 2] >> (4 * (position % 2))) & 15
                terms.append((cx, cy, (nibble / 7.5 - 1) * scale))
                position += 1
                cx += 1
        return terms

    l_terms = read_channel(lx, ly, l_scale)
    p_terms = read_channel(3, 3, p_scale * 1.25)
    q_terms = read_channel(3, 3, q_scale * 1.25)
    a_terms = read_channel(5, 5, a_scale) if has_alpha else []

    ratio = (l_max if is_landscape else header16 & 7) / (header16 & 7 if is_landscape else l_max)
    if ratio > 1:
        w, h = 32, math.floor(32 / ratio + 0.5)
    else:
        w, h = math.floor(32 * ratio + 0.5), 32

    pixels = []
    for y in range(h):
        for x in range(w):
            def value(dc, terms):
                return dc + sum(2 * ac * math.cos(math.pi / w * (x + 0.5) * cx)
                                * math.cos(math.pi / h * (y + 0.5) * cy)
                                for cx, cy, ac in terms)
            l, p, q = value(l_dc, l_terms), value(p_dc, p_terms), value(q_dc, q_terms)  # noqa: E741
            a = value(a_dc, a_terms)
            b = l - 2 / 3 * p
            r = (3 * l - b + q) / 2
            g = r - q
            pixels.extend(int(255 * min(max(v, 0.0), 1.0)) for v in (r, g, b, a))
    return w, h, pixels


def test_known_answer_decoding():
    """Test decoded pixels against exact values and a per-pixel evaluation."""
    print("\n" + "=" * 60)
    print("Test 8: Known-Answer Decoding")
    print("=" * 60)

    # Zero scales leave only the DC terms: l = 2/3, p = 1/63, q = -31/63
    # → r = 161/378, g = 347/378, b = 124/189 → (108, 234, 167) after truncation
    flat = pack_header(42, 32, 16, 0, False, 7, 0, 0, False) + bytes(19)
    w, h, rgba = ThumbHashDecoder().decode(flat)
    assert (w, h) == (32, 32)
    assert rgba == bytes([108, 234, 167, 255]) * (32 * 32)
    print("   ✓ DC-only hash decodes to (108, 234, 167, 255) everywhere")

    hashes = {
        "opaque impulse": bytes.fromhex('0108060700efce9bdecdab99994944151100030000000000'),
        "alpha impulse": bytes.fromhex('000882050011' + '00' * 12 + 'efacccab550610'),
        "random": ThumbHashEncoder().encode(
            23, 41, np.random.default_rng(19).integers(0, 256, (41, 23, 4), dtype=np.uint8)),
    }
    for name, hash_bytes in hashes.items():
        w, h, expected = reference_decode(hash_bytes)
        image = ThumbHashDecoder().decode_array(hash_bytes)
        assert image.shape == (h, w, 4)
        diff = np.abs(image.astype(int).ravel() - np.array(expected)).max()
        assert diff <= 1, f"{name}: max difference {diff}"
        print(f"   ✓ {name}: {w}x{h}, max difference {diff}")

    print("✅ Known-answer decoding test passed")


def main():
    """Run all Checkpoint 4 tests."""
    return run_checkpoint("CHECKPOINT 4: DECODER VERIFICATION", [
        ("Too-Short Hashes", test_too_short),
        ("Average Color", test_average_color),
        ("Aspect Ratio Agreement", test_aspect_ratio_agreement),
        ("Orientation", test_orientation),
        ("Solid Color Placeholder", test_solid_color_image),
        ("Coarse Structure", test_structure_preserved),
        ("Determinism and API", test_determinism_and_api),
        ("Known-Answer Decoding", test_known_answer_decoding),
    ])


if __name__ == "__main__":
    sys.exit(main())
