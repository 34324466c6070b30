"""RIFF chunk primitives.

This module provides the low-level pieces of the RIFF/WAVE codec: FourCC
constants, the error hierarchy, a bounds-checked cursor over an in-memory
source, and validation of the outer container header.
"""

import struct
from dataclasses import dataclass

# FourCC identifiers
RIFF_ID = b"RIFF"
WAVE_ID = b"WAVE"
FMT_ID = b"fmt "
DATA_ID = b"data"

CHUNK_HEADER_SIZE = 8
CONTAINER_HEADER_SIZE = 12

_HEADER_STRUCT = struct.Struct("<4sI")


def _format_id(chunk_id: bytes | None) -> str:
    if chunk_id is None:
        return "?"
    return chunk_id.decode("latin-1")


class RiffError(Exception):
    """Error reading or writing RIFF files.

    Attributes carry enough context to diagnose a malformed file without
    re-running it under a debugger. Any of them may be None.
    """

    def __init__(
        self,
        message: str,
        *,
        chunk_id: bytes | None = None,
        offset: int | None = None,
        declared: int | None = None,
        available: int | None = None,
    ) -> None:
        self.chunk_id = chunk_id
        self.offset = offset
        self.declared = declared
        self.available = available

        details = []
        if chunk_id is not None:
            details.append(f"chunk '{_format_id(chunk_id)}'")
        if offset is not None:
            details.append(f"offset {offset}")
        if declared is not None:
            details.append(f"declared {declared} bytes")
        if available is not None:
            details.append(f"{available} available")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)


class SourceUnavailableError(RiffError):
    """The byte source cannot be opened or read."""


class NotRiffContainerError(RiffError):
    """The leading tag is not RIFF."""


class NotWaveFormError(RiffError):
    """The RIFF form type is not WAVE."""


class TruncatedHeaderError(RiffError):
    """Fewer bytes remain than a chunk header needs."""


class TruncatedChunkError(RiffError):
    """Fewer bytes remain than a chunk declares."""


class MalformedFormatChunkError(RiffError):
    """The fmt chunk is smaller than its fixed fields."""


class IncompleteDocumentError(RiffError):
    """A fmt or data chunk is missing."""


@dataclass(frozen=True)
class ChunkHeader:
    """A chunk header: FourCC plus payload size."""

    chunk_id: bytes
    """Four-byte ASCII tag."""

    size: int
    """Payload length in bytes, excluding the 8-byte header."""

    offset: int = 0
    """Position of the header within the source."""


@dataclass(frozen=True)
class ContainerHeader:
    """The outer RIFF header."""

    chunk_id: bytes
    size: int
    form: bytes


class ChunkCursor:
    """Sequential, bounds-checked reader over an in-memory RIFF source.

    Payloads are never partially consumed: every read or skip is checked
    against the remaining length first, so the next ``read_header`` call
    always starts on a header boundary.
    """

    def __init__(self, source: bytes | bytearray | memoryview, offset: int = 0) -> None:
        self._view = memoryview(source).toreadonly().cast("B")
        if not 0 <= offset <= len(self._view):
            raise ValueError(f"offset {offset} outside source of {len(self._view)} bytes")
        self._offset = offset

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def size(self) -> int:
        """Total length of the source."""
        return len(self._view)

    @property
    def remaining(self) -> int:
        return len(self._view) - self._offset

    @property
    def exhausted(self) -> bool:
        return self.remaining == 0

    def read_header(self) -> ChunkHeader:
        """Read a chunk header (FourCC + size).

        Raises:
            TruncatedHeaderError: If fewer than 8 bytes remain.
        """
        if self.remaining < CHUNK_HEADER_SIZE:
            raise TruncatedHeaderError(
                "Unexpected end of source reading chunk header",
                offset=self._offset,
                declared=CHUNK_HEADER_SIZE,
                available=self.remaining,
            )

        offset = self._offset
        chunk_id, size = _HEADER_STRUCT.unpack_from(self._view, offset)
        self._offset += CHUNK_HEADER_SIZE
        return ChunkHeader(chunk_id=chunk_id, size=size, offset=offset)

    def peek(self, n: int) -> bytes:
        """Return up to ``n`` upcoming bytes without advancing."""
        return self._view[self._offset : self._offset + n].tobytes()

    def read(self, n: int, chunk_id: bytes | None = None) -> bytes:
        """Copy the next ``n`` bytes out of the source.

        Raises:
            TruncatedChunkError: If ``n`` exceeds the remaining bytes. The
                check happens before anything is allocated.
        """
        self._check_available(n, chunk_id)
        start = self._offset
        self._offset += n
        return self._view[start : self._offset].tobytes()

    def skip(self, n: int, chunk_id: bytes | None = None) -> None:
        """Advance ``n`` bytes without materializing them.

        Raises:
            TruncatedChunkError: If ``n`` exceeds the remaining bytes.
        """
        self._check_available(n, chunk_id)
        self._offset += n

    def skip_padding(self, size: int) -> bool:
        """Skip the pad byte that follows an odd-sized payload.

        A missing pad byte at the very end of the source is tolerated.

        Returns:
            True if a byte was skipped.
        """
        if size % 2 and self.remaining > 0:
            self._offset += 1
            return True
        return False

    def _check_available(self, n: int, chunk_id: bytes | None) -> None:
        if n < 0:
            raise ValueError(f"Cannot consume a negative byte count: {n}")
        if n > self.remaining:
            raise TruncatedChunkError(
                "Chunk extends past end of source",
                chunk_id=chunk_id,
                offset=self._offset,
                declared=n,
                available=self.remaining,
            )


def read_container_header(cursor: ChunkCursor) -> ContainerHeader:
    """Read and validate the 12-byte RIFF/WAVE header.

    Args:
        cursor: Cursor positioned at the start of the source.

    Returns:
        The parsed header; the cursor is left at the first inner chunk.

    Raises:
        TruncatedHeaderError: If the source is shorter than 12 bytes.
        NotRiffContainerError: If the leading tag is not RIFF.
        NotWaveFormError: If the form type is not WAVE.
    """
    # The tag is checked first so a short non-RIFF source is reported as such
    start = cursor.offset
    leading = cursor.peek(4)
    if len(leading) == 4 and leading != RIFF_ID:
        raise NotRiffContainerError("Not a RIFF file", chunk_id=leading, offset=start)

    if cursor.remaining < CONTAINER_HEADER_SIZE:
        raise TruncatedHeaderError(
            "Source too small to be a valid WAV file",
            offset=start,
            declared=CONTAINER_HEADER_SIZE,
            available=cursor.remaining,
        )

    header = cursor.read_header()

    form = cursor.read(4, chunk_id=RIFF_ID)
    if form != WAVE_ID:
        raise NotWaveFormError(
            f"Not a WAVE file (form type '{_format_id(form)}')",
            chunk_id=header.chunk_id,
            offset=header.offset + CHUNK_HEADER_SIZE,
        )

    return ContainerHeader(chunk_id=header.chunk_id, size=header.size, form=form)


def pack_chunk_header(chunk_id: bytes, size: int) -> bytes:
    """Serialize a chunk header."""
    if len(chunk_id) != 4:
        raise ValueError(f"FourCC must be 4 bytes, got {chunk_id!r}")
    if not 0 <= size <= 0xFFFFFFFF:
        raise RiffError(f"Chunk size {size} does not fit in 32 bits", chunk_id=chunk_id)
    return _HEADER_STRUCT.pack(chunk_id, size)
