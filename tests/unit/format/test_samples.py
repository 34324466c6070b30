"""Unit tests for sample interpretation."""

import numpy as np
import pytest

from wavkit.format import (
    AudioFormat,
    DataBlock,
    FormatRecord,
    decode_samples,
    decode_wav,
    document_from_samples,
    encode_wav,
    validate_document,
)
from wavkit.format.riff import RIFF_ID, WAVE_ID, ContainerHeader
from wavkit.format.types import WavDocument


def _document(audio_format: int, channels: int, bits: int, payload: bytes) -> WavDocument:
    block_align = channels * ((bits + 7) // 8)
    fmt = FormatRecord(
        audio_format=audio_format,
        num_channels=channels,
        sample_rate=8000,
        byte_rate=8000 * block_align,
        block_align=block_align,
        bits_per_sample=bits,
    )
    container = ContainerHeader(chunk_id=RIFF_ID, size=0, form=WAVE_ID)
    return WavDocument(container=container, format=fmt, data=DataBlock(payload))


class TestDecodeSamples:
    """Tests for decode_samples."""

    def test_8bit_unsigned(self) -> None:
        """Test that 8-bit WAV samples are centered at 128."""
        document = _document(AudioFormat.PCM, 1, 8, bytes([128, 0, 255]))

        samples = decode_samples(document)

        assert samples.shape == (3, 1)
        assert samples.dtype == np.float32
        assert samples[0, 0] == pytest.approx(0.0)
        assert samples[1, 0] == pytest.approx(-1.0)
        assert samples[2, 0] == pytest.approx(127 / 128)

    def test_16bit_stereo_interleaved(self) -> None:
        """Test that interleaved stereo splits into columns."""
        payload = np.array([0, 16384, -32768, 32767], dtype="<i2").tobytes()
        document = _document(AudioFormat.PCM, 2, 16, payload)

        samples = decode_samples(document)

        assert samples.shape == (2, 2)
        np.testing.assert_allclose(samples[:, 0], [0.0, -1.0])
        np.testing.assert_allclose(samples[:, 1], [0.5, 32767 / 32768], rtol=1e-6)

    def test_24bit(self) -> None:
        """Test sign extension of 24-bit samples."""
        payload = bytes([0x00, 0x00, 0x40, 0x00, 0x00, 0x80, 0xFF, 0xFF, 0xFF])
        document = _document(AudioFormat.PCM, 1, 24, payload)

        samples = decode_samples(document)[:, 0]

        np.testing.assert_allclose(samples, [0.5, -1.0, -1 / 8388608], rtol=1e-6)

    def test_32bit_int(self) -> None:
        payload = np.array([1 << 30, -(1 << 31)], dtype="<i4").tobytes()
        samples = decode_samples(_document(AudioFormat.PCM, 1, 32, payload))[:, 0]
        np.testing.assert_allclose(samples, [0.5, -1.0])

    def test_float32(self) -> None:
        payload = np.array([0.25, -0.75], dtype="<f4").tobytes()
        samples = decode_samples(_document(AudioFormat.IEEE_FLOAT, 1, 32, payload))[:, 0]
        np.testing.assert_allclose(samples, [0.25, -0.75])

    def test_float64(self) -> None:
        payload = np.array([0.125], dtype="<f8").tobytes()
        samples = decode_samples(_document(AudioFormat.IEEE_FLOAT, 1, 64, payload))[:, 0]
        np.testing.assert_allclose(samples, [0.125])

    def test_partial_frame_ignored(self) -> None:
        """Test that trailing bytes short of a frame are dropped."""
        payload = np.array([1, 2, 3], dtype="<i2").tobytes() + b"\x00"
        samples = decode_samples(_document(AudioFormat.PCM, 2, 16, payload))
        assert samples.shape == (1, 2)

    def test_unsupported_format(self) -> None:
        with pytest.raises(ValueError, match="mu-law"):
            decode_samples(_document(AudioFormat.MULAW, 1, 8, b"\x00"))

    def test_unsupported_bit_depth(self) -> None:
        with pytest.raises(ValueError, match="bit depth"):
            decode_samples(_document(AudioFormat.PCM, 1, 12, b"\x00\x00"))

    def test_zero_channels(self) -> None:
        with pytest.raises(ValueError):
            decode_samples(_document(AudioFormat.PCM, 0, 16, b"\x00\x00"))


class TestDocumentFromSamples:
    """Tests for document_from_samples."""

    @pytest.mark.parametrize("bits", [8, 16, 24, 32])
    def test_consistent_format(self, bits: int) -> None:
        """Test that generated documents pass validation without warnings."""
        samples = np.sin(np.linspace(0, 2 * np.pi, 64, endpoint=False)) * 0.5

        document = document_from_samples(samples, 22050, bits_per_sample=bits)
        result = validate_document(document)

        assert result.valid
        assert result.warnings == []
        assert document.format.bits_per_sample == bits
        assert document.num_frames == 64

    @pytest.mark.parametrize("bits,tolerance", [(8, 1 / 64), (16, 1e-4), (24, 1e-6), (32, 1e-7)])
    def test_samples_survive_encoding(self, bits: int, tolerance: float) -> None:
        """Test that samples written and decoded again stay close."""
        samples = np.array([[0.0, 0.5], [-0.5, 0.25], [0.9, -0.9]])

        document = decode_wav(encode_wav(document_from_samples(samples, 48000, bits_per_sample=bits)))
        decoded = decode_samples(document)

        assert decoded.shape == (3, 2)
        np.testing.assert_allclose(decoded, samples, atol=tolerance)

    def test_float_format_for_32_bit(self) -> None:
        document = document_from_samples(np.zeros(4), 44100, bits_per_sample=32)
        assert document.format.audio_format == AudioFormat.IEEE_FLOAT

    def test_clips_out_of_range(self) -> None:
        document = document_from_samples(np.array([2.0, -2.0]), 8000)
        np.testing.assert_allclose(decode_samples(document)[:, 0], [32767 / 32768, -32767 / 32768])

    def test_container_size_matches_encoding(self) -> None:
        document = document_from_samples(np.zeros(3), 8000, bits_per_sample=8)
        assert document.container.size == len(encode_wav(document)) - 8

    def test_rejects_3d(self) -> None:
        with pytest.raises(ValueError):
            document_from_samples(np.zeros((2, 2, 2)), 8000)

    def test_rejects_bit_depth(self) -> None:
        with pytest.raises(ValueError):
            document_from_samples(np.zeros(4), 8000, bits_per_sample=12)
