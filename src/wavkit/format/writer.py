"""WAV document writer.

This module serializes a WavDocument back into a contiguous RIFF/WAVE
buffer: RIFF header, fmt chunk, data chunk. Every length field is
recomputed from the bytes actually written. The fmt extension is written
back as decoded; unknown chunks from the source are not carried over.
"""

import logging
from pathlib import Path

from wavkit.format.riff import (
    CHUNK_HEADER_SIZE,
    DATA_ID,
    FMT_ID,
    RIFF_ID,
    WAVE_ID,
    IncompleteDocumentError,
    pack_chunk_header,
)
from wavkit.format.types import WavDocument

logger = logging.getLogger(__name__)


def encode_wav(document: WavDocument, *, word_align: bool = True) -> bytes:
    """Encode a document as a complete WAV file.

    Args:
        document: The document to serialize.
        word_align: Append a zero pad byte after an odd-length chunk payload.

    Returns:
        The complete WAV file as bytes.

    Raises:
        IncompleteDocumentError: If the document lacks a format record or
            data buffer.
    """
    if document.format is None:
        raise IncompleteDocumentError("Cannot encode a document without a fmt chunk", chunk_id=FMT_ID)
    if document.data is None or document.data.data is None:
        raise IncompleteDocumentError("Cannot encode a document without a data chunk", chunk_id=DATA_ID)

    fmt_payload = document.format.to_bytes()
    fmt_size = len(fmt_payload)
    fmt_pad = b"\x00" if word_align and fmt_size % 2 else b""

    samples = document.data.data
    data_size = len(samples)
    pad = b"\x00" if word_align and data_size % 2 else b""

    # Total RIFF size = file size - 8 (RIFF header)
    # 4 (WAVE) + 8+fmt_size+fmt_pad (fmt chunk) + 8+data_size+pad (data chunk)
    riff_size = 4 + CHUNK_HEADER_SIZE + fmt_size + len(fmt_pad) + CHUNK_HEADER_SIZE + data_size + len(pad)

    wav = bytearray()

    # RIFF header
    wav.extend(pack_chunk_header(RIFF_ID, riff_size))
    wav.extend(WAVE_ID)

    # fmt chunk
    wav.extend(pack_chunk_header(FMT_ID, fmt_size))
    wav.extend(fmt_payload)
    wav.extend(fmt_pad)

    # data chunk
    wav.extend(pack_chunk_header(DATA_ID, data_size))
    wav.extend(samples)
    wav.extend(pad)

    if document.container.size != riff_size:
        logger.debug("Recomputed RIFF size %d (declared %d)", riff_size, document.container.size)

    return bytes(wav)


def save_wav(path: Path | str, document: WavDocument, *, word_align: bool = True) -> None:
    """Encode a document and write it to ``path``."""
    path = Path(path)
    path.write_bytes(encode_wav(document, word_align=word_align))
