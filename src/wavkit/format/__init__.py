"""RIFF/WAVE codec module.

This module decodes WAV files into immutable documents and encodes
documents back into playable buffers.

Format Overview
---------------
A WAV file is a RIFF container holding a list of tagged, length-prefixed
chunks. Only two are required; everything else is skipped on decode:

    +----------------------------------------+
    | RIFF Header ("WAVE")                   |
    +----------------------------------------+
    | fmt  chunk (audio format)              |
    |   - format tag, channels, sample rate  |
    |   - byte rate, block align, bit depth  |
    +----------------------------------------+
    | other chunks (LIST, fact, cue , ...)   |
    |   - skipped                            |
    +----------------------------------------+
    | data chunk (sample payload, opaque)    |
    +----------------------------------------+

Example Usage
-------------
>>> from wavkit.format import load_wav, encode_wav
>>> document = load_wav("tune.wav")
>>> print(document.format.sample_rate, len(document.data))
>>> buffer = encode_wav(document)
"""

from wavkit.format.options import DecodeOptions, DuplicatePolicy
from wavkit.format.reader import decode_wav, load_wav
from wavkit.format.riff import (
    ChunkCursor,
    ChunkHeader,
    ContainerHeader,
    IncompleteDocumentError,
    MalformedFormatChunkError,
    NotRiffContainerError,
    NotWaveFormError,
    RiffError,
    SourceUnavailableError,
    TruncatedChunkError,
    TruncatedHeaderError,
)
from wavkit.format.samples import decode_samples, document_from_samples
from wavkit.format.types import AudioFormat, DataBlock, FormatRecord, WavDocument
from wavkit.format.validation import ValidationError, ValidationResult, validate_document
from wavkit.format.writer import encode_wav, save_wav

__all__ = [
    # Types
    "AudioFormat",
    "ChunkHeader",
    "ContainerHeader",
    "FormatRecord",
    "DataBlock",
    "WavDocument",
    # Options
    "DecodeOptions",
    "DuplicatePolicy",
    # Reader
    "ChunkCursor",
    "decode_wav",
    "load_wav",
    # Writer
    "encode_wav",
    "save_wav",
    # Samples
    "decode_samples",
    "document_from_samples",
    # Validation
    "validate_document",
    "ValidationResult",
    "ValidationError",
    # Errors
    "RiffError",
    "SourceUnavailableError",
    "NotRiffContainerError",
    "NotWaveFormError",
    "TruncatedHeaderError",
    "TruncatedChunkError",
    "MalformedFormatChunkError",
    "IncompleteDocumentError",
]
