"""Codec modules for the ThumbHash placeholder codec."""

from .encoder import ThumbHashEncoder, rgba_to_thumb_hash
from .decoder import (
    ThumbHashDecoder,
    thumb_hash_to_rgba,
    thumb_hash_to_average_rgba,
    thumb_hash_to_approximate_aspect_ratio,
    thumb_hash_to_data_url,
)

__all__ = [
    'ThumbHashEncoder',
    'ThumbHashDecoder',
    'rgba_to_thumb_hash',
    'thumb_hash_to_rgba',
    'thumb_hash_to_average_rgba',
    'thumb_hash_to_approximate_aspect_ratio',
    'thumb_hash_to_data_url',
]
