"""ThumbHash: compact image placeholders.

encode() turns a small RGBA image into a 5-25 byte hash; decode() renders the
hash back into a blurred 32-pixel placeholder. average_color() and
aspect_ratio() read only the header, and data_url() renders the placeholder
as a PNG data URL.
"""

from .codec import (
    ThumbHashEncoder,
    ThumbHashDecoder,
    rgba_to_thumb_hash as encode,
    thumb_hash_to_rgba as decode,
    thumb_hash_to_average_rgba as average_color,
    thumb_hash_to_approximate_aspect_ratio as aspect_ratio,
    thumb_hash_to_data_url as data_url,
)
from .io import HashTooShortError, hash_to_base64, base64_to_hash

__version__ = '0.1.0'

__all__ = [
    'encode',
    'decode',
    'average_color',
    'aspect_ratio',
    'data_url',
    'ThumbHashEncoder',
    'ThumbHashDecoder',
    'HashTooShortError',
    'hash_to_base64',
    'base64_to_hash',
]
