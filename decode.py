#!/usr/bin/env python3
"""
ThumbHash Decoder CLI

Usage:
    python decode.py (--input <path> | --hash <base64>) [--output <path>] [--data-url]

Example:
    python decode.py --input photo.thash --output placeholder.png
"""

import argparse
import sys
import os
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from thumbcodec.io import write_image, rgba_to_data_url, base64_to_hash, HashTooShortError
from thumbcodec.codec import ThumbHashDecoder


def main():
    parser = argparse.ArgumentParser(
        description='ThumbHash Decoder - Render placeholder images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Decode a raw hash file to PNG
  python decode.py --input photo.thash --output placeholder.png

  # Decode a base64 hash
  python decode.py --hash 1QcSHQRnh493V4dIh4eXh1h4kJUI --output placeholder.png

  # Decode to NumPy format with verbose output
  python decode.py --input photo.thash --output placeholder.npy --verbose

  # Print an <img> src for the placeholder
  python decode.py --input photo.thash --data-url
        """
    )

    # Required arguments
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--input', '-i',
                        help='Input hash file path (raw bytes)')
    source.add_argument('--hash', '-H',
                        help='Hash as base64 text')
    parser.add_argument('--output', '-o',
                        help='Output image path (.png or .npy)')

    # Optional arguments
    parser.add_argument('--format', '-f', choices=['png', 'npy'], default=None,
                        help='Output format (default: from extension)')
    parser.add_argument('--data-url', '-d', action='store_true',
                        help='Print the placeholder as a PNG data URL on stdout')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')

    args = parser.parse_args()

    if args.output is None and not args.data_url:
        print("Error: give --output and/or --data-url", file=sys.stderr)
        sys.exit(1)

    # Check input file exists
    if args.input is not None and not os.path.exists(args.input):
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    try:
        start_time = time.time()

        if args.input is not None:
            if args.verbose:
                print(f"Reading hash file: {args.input}")
            with open(args.input, 'rb') as f:
                hash_bytes = f.read()
        else:
            hash_bytes = base64_to_hash(args.hash)

        if args.verbose:
            print(f"  Hash size: {len(hash_bytes)} bytes")
            print("Decoding...")

        image = ThumbHashDecoder().decode_array(hash_bytes)

        elapsed = time.time() - start_time

        written = None
        if args.output is not None:
            written = write_image(image, args.output, format=args.format)

        if args.data_url:
            print(rgba_to_data_url(image.shape[1], image.shape[0], image))

        if args.verbose:
            print(f"\nPlaceholder image:")
            print(f"  Size: {image.shape[1]}x{image.shape[0]}")
            print(f"  Decoding time: {elapsed * 1000:.1f}ms")
            if written is not None:
                print(f"\nOutput written to: {written}")
        elif written is not None:
            print(f"Decoded: {args.input or 'base64 hash'} -> {written} "
                  f"({image.shape[1]}x{image.shape[0]})")

    except HashTooShortError as e:
        print(f"Error: Invalid hash - {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
