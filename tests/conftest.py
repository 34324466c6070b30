"""Shared fixtures for building RIFF/WAVE byte strings by hand."""

import struct
from collections.abc import Callable

import pytest

FMT_FIELDS = (1, 2, 44100, 176400, 4, 16)
SAMPLE_DATA = bytes([0x01, 0x02, 0x03, 0x04])


def chunk(chunk_id: bytes, payload: bytes, declared: int | None = None, pad: bool = True) -> bytes:
    """Serialize one chunk, padding odd payloads unless told not to."""
    size = len(payload) if declared is None else declared
    body = chunk_id + struct.pack("<I", size) + payload
    if pad and len(payload) % 2:
        body += b"\x00"
    return body


def fmt_payload(fields: tuple[int, ...] = FMT_FIELDS, extension: bytes = b"") -> bytes:
    return struct.pack("<HHIIHH", *fields) + extension


def riff(*chunks: bytes, declared: int | None = None, form: bytes = b"WAVE") -> bytes:
    """Wrap chunks in a RIFF header with a correct (or given) size."""
    body = form + b"".join(chunks)
    size = len(body) if declared is None else declared
    return b"RIFF" + struct.pack("<I", size) + body


@pytest.fixture
def build_chunk() -> Callable[..., bytes]:
    return chunk


@pytest.fixture
def build_fmt() -> Callable[..., bytes]:
    return fmt_payload


@pytest.fixture
def build_riff() -> Callable[..., bytes]:
    return riff


@pytest.fixture
def minimal_wav() -> bytes:
    """RIFF/WAVE with a 16-byte stereo fmt chunk and 4 data bytes."""
    return riff(chunk(b"fmt ", fmt_payload()), chunk(b"data", SAMPLE_DATA))
