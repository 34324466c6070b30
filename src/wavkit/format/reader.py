"""WAV document reader.

This module walks the chunk list of a RIFF/WAVE source and assembles a
WavDocument from its fmt and data chunks. Unknown chunks are skipped.
"""

import logging
from pathlib import Path

from wavkit.format.options import DecodeOptions, DuplicatePolicy
from wavkit.format.riff import (
    CHUNK_HEADER_SIZE,
    DATA_ID,
    FMT_ID,
    ChunkCursor,
    ChunkHeader,
    IncompleteDocumentError,
    MalformedFormatChunkError,
    RiffError,
    SourceUnavailableError,
    TruncatedChunkError,
    read_container_header,
)
from wavkit.format.types import FMT_FIELDS_SIZE, DataBlock, FormatRecord, WavDocument

logger = logging.getLogger(__name__)


def decode_fmt_chunk(cursor: ChunkCursor, header: ChunkHeader) -> FormatRecord:
    """Decode a fmt chunk whose header has just been read.

    Extension bytes beyond the 16 fixed fields are kept on the record so
    extensible headers survive re-encoding.

    Raises:
        MalformedFormatChunkError: If the chunk is smaller than 16 bytes.
        TruncatedChunkError: If the chunk extends past the end of the source.
    """
    if header.size < FMT_FIELDS_SIZE:
        raise MalformedFormatChunkError(
            f"fmt chunk too small, need at least {FMT_FIELDS_SIZE} bytes",
            chunk_id=header.chunk_id,
            offset=header.offset,
            declared=header.size,
        )
    if header.size > cursor.remaining:
        raise TruncatedChunkError(
            "fmt chunk extends past end of source",
            chunk_id=header.chunk_id,
            offset=header.offset,
            declared=header.size,
            available=cursor.remaining,
        )

    record = FormatRecord.from_bytes(cursor.read(header.size, chunk_id=header.chunk_id))
    if record.extension:
        logger.debug("fmt chunk at offset %d carries %d extension bytes", header.offset, len(record.extension))
    return record


def decode_data_chunk(
    cursor: ChunkCursor,
    header: ChunkHeader,
    max_size: int | None = None,
) -> DataBlock:
    """Decode a data chunk whose header has just been read.

    The declared size is untrusted: it is bounded by the remaining source
    (and by ``max_size`` when given) before any buffer is allocated.

    Raises:
        TruncatedChunkError: If fewer bytes remain than the header declares.
        RiffError: If the declared size exceeds ``max_size``.
    """
    if max_size is not None and header.size > max_size:
        raise RiffError(
            f"data chunk exceeds the {max_size} byte limit",
            chunk_id=header.chunk_id,
            offset=header.offset,
            declared=header.size,
        )
    if header.size > cursor.remaining:
        raise TruncatedChunkError(
            "data chunk extends past end of source",
            chunk_id=header.chunk_id,
            offset=header.offset,
            declared=header.size,
            available=cursor.remaining,
        )
    return DataBlock(cursor.read(header.size, chunk_id=header.chunk_id))


def decode_wav(
    source: bytes | bytearray | memoryview,
    options: DecodeOptions | None = None,
) -> WavDocument:
    """Decode a complete RIFF/WAVE file held in memory.

    Args:
        source: The file contents, starting at offset 0.
        options: Decoder configuration (defaults to DecodeOptions()).

    Returns:
        The decoded document. Decode-time anomalies are listed in its
        ``warnings`` attribute.

    Raises:
        RiffError: Any structural problem; see the subclasses in
            wavkit.format.riff.
    """
    options = options or DecodeOptions()
    cursor = ChunkCursor(source)
    container = read_container_header(cursor)

    warnings: list[str] = []
    expected_size = container.size + CHUNK_HEADER_SIZE
    if expected_size != cursor.size:
        message = f"RIFF size declares {expected_size} bytes but source has {cursor.size}"
        logger.debug(message)
        warnings.append(message)

    fmt: FormatRecord | None = None
    data: DataBlock | None = None

    while not cursor.exhausted:
        if cursor.remaining < CHUNK_HEADER_SIZE:
            # Too short for another chunk header: stop scanning
            message = f"Ignoring {cursor.remaining} trailing bytes at offset {cursor.offset}"
            logger.debug(message)
            warnings.append(message)
            cursor.skip(cursor.remaining)
            break

        header = cursor.read_header()

        if header.chunk_id == FMT_ID:
            record = decode_fmt_chunk(cursor, header)
            if fmt is None:
                fmt = record
            else:
                _report_duplicate(header, options, warnings)
                if options.duplicate_policy is DuplicatePolicy.LAST:
                    fmt = record

        elif header.chunk_id == DATA_ID:
            block = decode_data_chunk(cursor, header, options.max_data_size)
            if data is None:
                data = block
            else:
                _report_duplicate(header, options, warnings)
                if options.duplicate_policy is DuplicatePolicy.LAST:
                    data = block

        else:
            logger.debug(
                "Skipping chunk '%s' (%d bytes) at offset %d",
                header.chunk_id.decode("latin-1"),
                header.size,
                header.offset,
            )
            cursor.skip(header.size, chunk_id=header.chunk_id)

        if options.word_align:
            cursor.skip_padding(header.size)

    missing = [name for name, chunk in (("fmt", fmt), ("data", data)) if chunk is None]
    if fmt is None or data is None:
        raise IncompleteDocumentError(
            f"Missing {' and '.join(missing)} chunk in WAV source",
            offset=cursor.offset,
        )

    return WavDocument(container=container, format=fmt, data=data, warnings=tuple(warnings))


def load_wav(path: Path | str, options: DecodeOptions | None = None) -> WavDocument:
    """Load and decode a WAV file.

    Args:
        path: Path to the WAV file.
        options: Decoder configuration.

    Returns:
        The decoded document.

    Raises:
        SourceUnavailableError: If the file cannot be read or is too large.
        RiffError: If the file is not a valid WAV file.
    """
    path = Path(path)
    options = options or DecodeOptions()

    try:
        file_size = path.stat().st_size
    except FileNotFoundError as e:
        raise SourceUnavailableError(f"File not found: {path}") from e
    except OSError as e:
        raise SourceUnavailableError(f"Cannot open file: {path}") from e

    if file_size > options.max_file_size:
        raise SourceUnavailableError(
            f"File size ({file_size / (1024 * 1024):.1f} MB) exceeds maximum "
            f"of {options.max_file_size / (1024 * 1024):.0f} MB: {path}",
            declared=file_size,
        )

    try:
        source = path.read_bytes()
    except OSError as e:
        raise SourceUnavailableError(f"Cannot read file: {path}") from e

    logger.debug("Decoding %s (%d bytes)", path, len(source))
    return decode_wav(source, options)


def _report_duplicate(header: ChunkHeader, options: DecodeOptions, warnings: list[str]) -> None:
    kept = "first" if options.duplicate_policy is DuplicatePolicy.FIRST else "last"
    message = (
        f"Multiple '{header.chunk_id.decode('latin-1')}' chunks found "
        f"(duplicate at offset {header.offset}, keeping the {kept})"
    )
    logger.warning(message)
    warnings.append(message)
