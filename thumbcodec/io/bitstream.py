"""Header packing and nibble-level reader/writer for ThumbHash bytes."""

from typing import Optional

from ..constants import (
    HEADER_SIZE, ALPHA_HEADER_SIZE,
    L_DC_BITS, P_DC_BITS, Q_DC_BITS, L_SCALE_BITS,
    L_LIMIT_BITS, P_SCALE_BITS, Q_SCALE_BITS,
    A_DC_BITS, A_SCALE_BITS,
)


class HashTooShortError(ValueError):
    """The hash ended before a byte the format requires."""


def _mask(bits: int) -> int:
    return (1 << bits) - 1


class NibbleWriter:
    """
    Packs 4-bit codes two per byte, low nibble first.

    States:
        Empty: no half-filled byte (pending is None)
        PendingLowNibble: pending holds the low nibble of the next byte

    Writing in Empty moves to PendingLowNibble. Writing in PendingLowNibble
    emits the completed byte and returns to Empty. flush() emits a pending
    low nibble with a zero high nibble.
    """

    def __init__(self, buffer: bytearray):
        """
        Initialize nibble writer.

        Args:
            buffer: bytearray that completed bytes are appended to
        """
        self.buffer = buffer
        self.pending: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.pending is None

    def write_nibble(self, value: int) -> None:
        """Write a single 4-bit code."""
        value = int(value) & 15
        if self.pending is None:
            self.pending = value
        else:
            self.buffer.append(self.pending | (value << 4))
            self.pending = None

    def write_nibbles(self, values) -> None:
        """Write a sequence of 4-bit codes."""
        for value in values:
            self.write_nibble(value)

    def flush(self) -> None:
        """Emit any pending low nibble as a final byte."""
        if self.pending is not None:
            self.buffer.append(self.pending)
            self.pending = None


class HashReader:
    """
    Byte and nibble reader over a hash.

    Nibble states:
        Empty: the next nibble is the low half of a fresh byte
        PendingHighNibble: pending holds the high half of the last byte read
    """

    def __init__(self, data: bytes, offset: int = 0):
        """
        Initialize hash reader.

        Args:
            data: Hash bytes
            offset: Byte position to start reading from
        """
        self.data = bytes(data)
        self.byte_ptr = offset
        self.pending: Optional[int] = None

    def read_byte(self) -> int:
        """Read one whole byte."""
        if self.byte_ptr >= len(self.data):
            raise HashTooShortError("hash is too short")
        byte = self.data[self.byte_ptr]
        self.byte_ptr += 1
        return byte

    def read_nibble(self) -> int:
        """Read one 4-bit code, low nibble first."""
        if self.pending is not None:
            value = self.pending
            self.pending = None
            return value

        byte = self.read_byte()
        self.pending = byte >> 4
        return byte & 15

    def read_nibbles(self, count: int) -> list:
        """
        Read count 4-bit codes.

        Raises:
            HashTooShortError: If fewer bytes remain than count needs. Nothing
                is consumed in that case.
        """
        buffered = 0 if self.pending is None else 1
        needed = (max(0, count - buffered) + 1) // 2
        if needed > self.bytes_remaining():
            raise HashTooShortError(
                f"hash is too short: {count} nibbles need {needed} more bytes, "
                f"{self.bytes_remaining()} left")
        return [self.read_nibble() for _ in range(count)]

    def bytes_remaining(self) -> int:
        """Return number of unread bytes."""
        return max(0, len(self.data) - self.byte_ptr)


def pack_header(l_dc: int, p_dc: int, q_dc: int, l_scale: int, has_alpha: bool,
                l_limit: int, p_scale: int, q_scale: int, is_landscape: bool,
                a_dc: int = 0, a_scale: int = 0) -> bytes:
    """
    Pack quantized header fields into 5 bytes (6 with alpha).

    Args:
        l_dc: Quantized luminance DC (6 bits)
        p_dc: Quantized P DC (6 bits)
        q_dc: Quantized Q DC (6 bits)
        l_scale: Quantized luminance AC scale (5 bits)
        has_alpha: Alpha channel present
        l_limit: Luminance grid size on the short axis (3 bits)
        p_scale: Quantized P AC scale (6 bits)
        q_scale: Quantized Q AC scale (6 bits)
        is_landscape: Original width > height
        a_dc: Quantized alpha DC (4 bits), written only with alpha
        a_scale: Quantized alpha AC scale (4 bits), written only with alpha

    Returns:
        Header bytes
    """
    header24 = (
        (l_dc & _mask(L_DC_BITS))
        | ((p_dc & _mask(P_DC_BITS)) << 6)
        | ((q_dc & _mask(Q_DC_BITS)) << 12)
        | ((l_scale & _mask(L_SCALE_BITS)) << 18)
        | ((1 if has_alpha else 0) << 23)
    )
    header16 = (
        (l_limit & _mask(L_LIMIT_BITS))
        | ((p_scale & _mask(P_SCALE_BITS)) << 3)
        | ((q_scale & _mask(Q_SCALE_BITS)) << 9)
        | ((1 if is_landscape else 0) << 15)
    )

    header = header24.to_bytes(3, 'little') + header16.to_bytes(2, 'little')
    if has_alpha:
        header += bytes([(a_dc & _mask(A_DC_BITS)) | ((a_scale & _mask(A_SCALE_BITS)) << 4)])
    return header


def unpack_header(data: bytes) -> dict:
    """
    Unpack the raw (still quantized) header fields.

    Args:
        data: Hash bytes (at least the header)

    Returns:
        Dictionary with header fields and 'header_size'

    Raises:
        HashTooShortError: If fewer than 5 bytes are available, or fewer
            than 6 when the alpha flag is set
    """
    reader = HashReader(data)
    header24 = reader.read_byte() | (reader.read_byte() << 8) | (reader.read_byte() << 16)
    header16 = reader.read_byte() | (reader.read_byte() << 8)

    has_alpha = (header24 >> 23) != 0
    fields = {
        'l_dc': header24 & _mask(L_DC_BITS),
        'p_dc': (header24 >> 6) & _mask(P_DC_BITS),
        'q_dc': (header24 >> 12) & _mask(Q_DC_BITS),
        'l_scale': (header24 >> 18) & _mask(L_SCALE_BITS),
        'has_alpha': has_alpha,
        'l_limit': header16 & _mask(L_LIMIT_BITS),
        'p_scale': (header16 >> 3) & _mask(P_SCALE_BITS),
        'q_scale': (header16 >> 9) & _mask(Q_SCALE_BITS),
        'is_landscape': (header16 >> 15) != 0,
        'a_dc': None,
        'a_scale': None,
        'header_size': HEADER_SIZE,
    }

    if has_alpha:
        header8 = reader.read_byte()
        fields['a_dc'] = header8 & _mask(A_DC_BITS)
        fields['a_scale'] = header8 >> 4
        fields['header_size'] = ALPHA_HEADER_SIZE

    return fields
