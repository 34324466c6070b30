"""wavkit - RIFF/WAVE decoding and encoding toolkit.

This package reads WAV files into immutable in-memory documents, checks
them for consistency, and re-encodes them into buffers ready for playback.

Example Usage
-------------
>>> from wavkit import load_wav, encode_wav, validate_document
>>> document = load_wav("tune.wav")
>>> print(f"{document.format.num_channels} ch, {document.duration_seconds:.2f}s")
>>> result = validate_document(document)
>>> buffer = encode_wav(document)
"""

# Re-export format module for convenience
from wavkit.format import (
    AudioFormat,
    DecodeOptions,
    DuplicatePolicy,
    FormatRecord,
    RiffError,
    ValidationError,
    WavDocument,
    decode_wav,
    encode_wav,
    load_wav,
    save_wav,
    validate_document,
)

__all__ = [
    # Types
    "AudioFormat",
    "FormatRecord",
    "WavDocument",
    "DecodeOptions",
    "DuplicatePolicy",
    # Reader
    "decode_wav",
    "load_wav",
    # Writer
    "encode_wav",
    "save_wav",
    # Validation
    "validate_document",
    "ValidationError",
    "RiffError",
]
