"""
Forward-Only Byte Source
========================

The decoders need exactly one thing from their input: "give me the next
K bytes, or fail if fewer remain". ByteStream wraps any readable binary
object (an open file, an io.BytesIO) and provides that, while tracking the
absolute cursor position for error messages.

The stream never seeks and never closes the object it wraps. Opening and
closing the underlying file is the caller's job (see pipeline.inspect_file).
"""

import io
import logging
from typing import BinaryIO

from mobihdr.errors import TruncatedInputError

logger = logging.getLogger(__name__)


class ByteStream:
    """
    Position-advancing reader over a binary source.

    Example:
        >>> stream = ByteStream.from_bytes(b"\\x01\\x02\\x03")
        >>> stream.read_exact(2)
        b'\\x01\\x02'
        >>> stream.position
        2
    """

    def __init__(self, source: BinaryIO, start: int = 0):
        """
        Initialize the stream.

        Args:
            source: Readable binary object positioned at the first byte to decode
            start: Absolute offset of that first byte, used in error messages
        """
        self._source = source
        self._position = start

    @classmethod
    def from_bytes(cls, data: bytes) -> "ByteStream":
        """Wrap an in-memory buffer."""
        return cls(io.BytesIO(data))

    @property
    def position(self) -> int:
        """Absolute offset of the next byte to be read."""
        return self._position

    def read_exact(self, count: int) -> bytes:
        """
        Read exactly count bytes and advance the cursor.

        A short read from the source is retried until the source reports
        end of data, so pipes and sockets behave like regular files.

        Raises:
            TruncatedInputError: If the source ends before count bytes
        """
        chunks = []
        remaining = count
        while remaining > 0:
            chunk = self._source.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)

        data = b"".join(chunks)
        start = self._position
        self._position += len(data)

        if len(data) < count:
            logger.debug(
                f"Short read at offset {start}: wanted {count}, got {len(data)}"
            )
            raise TruncatedInputError(expected=count, available=len(data), offset=start)

        return data
