"""I/O modules for the ThumbHash codec."""

from .bitstream import (
    HashTooShortError,
    NibbleWriter,
    HashReader,
    pack_header,
    unpack_header,
)
from .hash_text import hash_to_base64, base64_to_hash
from .image_reader import read_image_rgba, to_rgba_array, fit_size
from .image_writer import write_image, rgba_to_data_url

__all__ = [
    'HashTooShortError',
    'NibbleWriter',
    'HashReader',
    'pack_header',
    'unpack_header',
    'hash_to_base64',
    'base64_to_hash',
    'read_image_rgba',
    'to_rgba_array',
    'fit_size',
    'write_image',
    'rgba_to_data_url',
]
