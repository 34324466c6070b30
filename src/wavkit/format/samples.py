"""Sample interpretation for WAV documents.

The codec treats the data chunk as opaque bytes. This module interprets
that payload as numpy sample frames for the common linear formats, and
builds new documents from float sample arrays.

Supported: PCM 8 (unsigned), 16, 24, 32 bit; IEEE float 32 and 64 bit,
including both carried in a WAVE_FORMAT_EXTENSIBLE header.
"""

import numpy as np
from numpy.typing import NDArray

from wavkit.format.riff import CHUNK_HEADER_SIZE, RIFF_ID, WAVE_ID, ContainerHeader
from wavkit.format.types import FMT_FIELDS_SIZE, AudioFormat, DataBlock, FormatRecord, WavDocument


def decode_samples(document: WavDocument) -> NDArray[np.float32]:
    """Decode the data chunk to float samples in [-1, 1].

    Trailing bytes that do not form a whole frame are ignored.

    Args:
        document: A decoded document.

    Returns:
        Array of shape (num_frames, num_channels).

    Raises:
        ValueError: If the format or bit depth is not supported.
    """
    fmt = document.format
    if fmt.num_channels == 0:
        raise ValueError("Cannot decode samples with zero channels")

    bytes_per_sample = (fmt.bits_per_sample + 7) // 8
    frame_size = bytes_per_sample * fmt.num_channels
    usable = len(document.data) - len(document.data) % frame_size if frame_size else 0
    data = document.data.data[:usable]

    if fmt.sample_format == AudioFormat.PCM:
        samples = _decode_pcm(data, fmt.bits_per_sample)
    elif fmt.sample_format == AudioFormat.IEEE_FLOAT:
        samples = _decode_float(data, fmt.bits_per_sample)
    else:
        raise ValueError(f"Unsupported audio format for sample decoding: {fmt.format_name}")

    return samples.reshape(-1, fmt.num_channels)


def _decode_pcm(data: bytes, bit_depth: int) -> NDArray[np.float32]:
    if bit_depth == 8:
        # 8-bit WAV samples are unsigned, centered at 128
        samples = np.frombuffer(data, dtype=np.uint8)
        return (samples.astype(np.float32) - 128.0) / 128.0
    elif bit_depth == 16:
        samples = np.frombuffer(data, dtype="<i2")
        return samples.astype(np.float32) / 32768.0
    elif bit_depth == 24:
        return _decode_24bit(data)
    elif bit_depth == 32:
        samples = np.frombuffer(data, dtype="<i4")
        return samples.astype(np.float32) / 2147483648.0  # 2^31
    raise ValueError(f"Unsupported PCM bit depth: {bit_depth}")


def _decode_24bit(data: bytes) -> NDArray[np.float32]:
    """Decode little-endian 24-bit PCM samples."""
    raw = np.frombuffer(data, dtype=np.uint8).reshape(-1, 3).astype(np.int32)
    values = raw[:, 0] | (raw[:, 1] << 8) | (raw[:, 2] << 16)
    values = np.where(values >= 0x800000, values - 0x1000000, values)  # Sign extend
    return values.astype(np.float32) / 8388608.0  # 2^23


def _decode_float(data: bytes, bit_depth: int) -> NDArray[np.float32]:
    if bit_depth == 32:
        return np.frombuffer(data, dtype="<f4").astype(np.float32)
    elif bit_depth == 64:
        return np.frombuffer(data, dtype="<f8").astype(np.float32)
    raise ValueError(f"Unsupported float bit depth: {bit_depth}")


def document_from_samples(
    samples: NDArray[np.floating],
    sample_rate: int,
    bits_per_sample: int = 16,
) -> WavDocument:
    """Build a document from float samples in [-1, 1].

    Args:
        samples: Array of shape (num_frames,) or (num_frames, num_channels).
        sample_rate: The sample rate in Hz.
        bits_per_sample: 8, 16 or 24 for PCM; 32 for IEEE float.

    Returns:
        A new document with consistent format fields.

    Raises:
        ValueError: If the array shape or bit depth is not supported.
    """
    samples = np.asarray(samples, dtype=np.float64)
    if samples.ndim == 1:
        samples = samples[:, np.newaxis]
    elif samples.ndim != 2:
        raise ValueError(f"samples should be 1D or 2D, got {samples.ndim}D")

    num_channels = samples.shape[1]
    if num_channels == 0:
        raise ValueError("samples must have at least one channel")

    clipped = np.clip(samples, -1.0, 1.0)
    if bits_per_sample == 8:
        payload = np.round(clipped * 127.0 + 128.0).astype(np.uint8).tobytes()
    elif bits_per_sample == 16:
        payload = np.round(clipped * 32767.0).astype("<i2").tobytes()
    elif bits_per_sample == 24:
        values = np.round(clipped * 8388607.0).astype("<i4")
        # Keep the low three bytes of each little-endian int32
        payload = values.view(np.uint8).reshape(-1, 4)[:, :3].tobytes()
    elif bits_per_sample == 32:
        payload = samples.astype("<f4").tobytes()
    else:
        raise ValueError(f"Unsupported bit depth: {bits_per_sample}")

    audio_format = AudioFormat.IEEE_FLOAT if bits_per_sample == 32 else AudioFormat.PCM
    block_align = num_channels * (bits_per_sample // 8)
    fmt = FormatRecord(
        audio_format=int(audio_format),
        num_channels=num_channels,
        sample_rate=sample_rate,
        byte_rate=sample_rate * block_align,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
    )

    data_size = len(payload)
    riff_size = 4 + CHUNK_HEADER_SIZE + FMT_FIELDS_SIZE + CHUNK_HEADER_SIZE + data_size + data_size % 2
    container = ContainerHeader(chunk_id=RIFF_ID, size=riff_size, form=WAVE_ID)
    return WavDocument(container=container, format=fmt, data=DataBlock(payload))
