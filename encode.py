#!/usr/bin/env python3
"""
ThumbHash Encoder CLI

Usage:
    python encode.py --input <image> [--output <path>] [--base64]

Example:
    python encode.py --input photo.jpg --output photo.thash --verbose
"""

import argparse
import sys
import os
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import numpy as np
from thumbcodec.io import read_image_rgba, hash_to_base64
from thumbcodec.codec import ThumbHashEncoder, ThumbHashDecoder
from thumbcodec.codec import thumb_hash_to_average_rgba, thumb_hash_to_approximate_aspect_ratio
from thumbcodec.constants import MAX_INPUT_SIZE
from thumbcodec.metrics import calculate_bpp, calculate_compression_ratio, placeholder_psnr


def main():
    parser = argparse.ArgumentParser(
        description='ThumbHash Encoder - Compact placeholders for images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Encode to a raw hash file
  python encode.py --input photo.jpg --output photo.thash

  # Print the hash as base64
  python encode.py --input photo.png --base64

  # Encode with verbose output
  python encode.py --input photo.png --output photo.thash --verbose
        """
    )

    # Required arguments
    parser.add_argument('--input', '-i', required=True,
                        help='Input image path (any format Pillow can read)')

    # Optional arguments
    parser.add_argument('--output', '-o',
                        help='Output hash file path (raw bytes)')
    parser.add_argument('--base64', '-b', action='store_true',
                        help='Print the hash as base64 on stdout')
    parser.add_argument('--max-size', '-m', type=int, default=MAX_INPUT_SIZE,
                        help=f'Resize so both sides fit this limit (default: {MAX_INPUT_SIZE})')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    args = parser.parse_args()

    if not 1 <= args.max_size <= MAX_INPUT_SIZE:
        print(f"Error: --max-size must be between 1 and {MAX_INPUT_SIZE}, got {args.max_size}",
              file=sys.stderr)
        sys.exit(1)

    if args.output is None and not args.base64:
        print("Error: give --output and/or --base64", file=sys.stderr)
        sys.exit(1)

    # Check input file exists
    if not os.path.exists(args.input):
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.verbose:
            print(f"Reading input: {args.input}")

        start_time = time.time()

        width, height, rgba = read_image_rgba(args.input, max_size=args.max_size)

        if args.verbose:
            print(f"  Size: {width}x{height} (after fitting to {args.max_size}x{args.max_size})")
            print("Encoding...")

        hash_bytes = ThumbHashEncoder().encode(width, height, rgba)

        elapsed = time.time() - start_time

        if args.output is not None:
            with open(args.output, 'wb') as f:
                f.write(hash_bytes)

        if args.base64:
            print(hash_to_base64(hash_bytes))

        if args.verbose:
            bpp = calculate_bpp(len(hash_bytes), (height, width))
            cr = calculate_compression_ratio(len(rgba), len(hash_bytes))
            ratio = thumb_hash_to_approximate_aspect_ratio(hash_bytes)
            r, g, b, a = thumb_hash_to_average_rgba(hash_bytes)

            placeholder = ThumbHashDecoder().decode_array(hash_bytes)
            ph, pw = placeholder.shape[:2]
            source = np.frombuffer(rgba, dtype=np.uint8).reshape(height, width, 4)
            psnr = placeholder_psnr(source, placeholder)

            print(f"\nResults:")
            print(f"  Hash size:         {len(hash_bytes)} bytes")
            print(f"  Compression ratio: {cr:.1f}x")
            print(f"  Bits per pixel:    {bpp:.4f}")
            print(f"  Aspect ratio:      {ratio:.3f}")
            print(f"  Average color:     ({r:.3f}, {g:.3f}, {b:.3f}, {a:.3f})")
            print(f"  Placeholder:       {pw}x{ph}, PSNR {psnr:.2f}dB")
            print(f"  Encoding time:     {elapsed * 1000:.1f}ms")
            if args.output is not None:
                print(f"\nOutput written to: {args.output}")
        elif args.output is not None:
            print(f"Encoded: {args.input} -> {args.output} ({len(hash_bytes)} bytes)")

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
