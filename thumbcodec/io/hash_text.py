"""Text transport for hashes (base64)."""

import base64
import binascii


def hash_to_base64(hash_bytes: bytes) -> str:
    """Encode hash bytes as standard base64 text."""
    return base64.b64encode(bytes(hash_bytes)).decode('ascii')


def base64_to_hash(text: str) -> bytes:
    """
    Decode base64 text back to hash bytes.

    Padding is optional: hashes are often stored with the trailing '='
    stripped, so it is restored before decoding.

    Raises:
        ValueError: If text is not valid base64
    """
    text = text.strip()
    text += '=' * (-len(text) % 4)
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 hash: {e}") from e
