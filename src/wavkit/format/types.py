"""Python types for decoded WAV documents."""

import struct
from dataclasses import dataclass, field
from enum import IntEnum

from wavkit.format.riff import ContainerHeader

FMT_FIELDS_SIZE = 16

FMT_STRUCT = struct.Struct("<HHIIHH")

# WAVEX extension: cbSize, wValidBitsPerSample, dwChannelMask, SubFormat GUID
EXTENSIBLE_SIZE = 24
SUBFORMAT_OFFSET = 8


class AudioFormat(IntEnum):
    """Well-known values of the fmt chunk's format tag.

    FormatRecord keeps the raw integer so unknown tags survive a round trip.
    """

    PCM = 0x0001
    ADPCM = 0x0002
    IEEE_FLOAT = 0x0003
    ALAW = 0x0006
    MULAW = 0x0007
    EXTENSIBLE = 0xFFFE

    @classmethod
    def from_tag(cls, tag: int) -> "AudioFormat | None":
        """Look up a format tag, returning None for unknown values."""
        try:
            return cls(tag)
        except ValueError:
            return None

    @property
    def display_name(self) -> str:
        """Human-readable name for this format."""
        names = {
            self.PCM: "PCM",
            self.ADPCM: "Microsoft ADPCM",
            self.IEEE_FLOAT: "IEEE float",
            self.ALAW: "A-law",
            self.MULAW: "mu-law",
            self.EXTENSIBLE: "Extensible",
        }
        return names.get(self, "Unknown")


@dataclass(frozen=True)
class FormatRecord:
    """Fields of the fmt chunk."""

    audio_format: int
    """Format tag (1 = PCM, 3 = IEEE float, ...)."""

    num_channels: int
    """Number of interleaved channels."""

    sample_rate: int
    """Frames per second in Hz."""

    byte_rate: int
    """Average bytes per second."""

    block_align: int
    """Bytes per frame across all channels."""

    bits_per_sample: int
    """Bits per sample of a single channel."""

    extension: bytes = b""
    """Bytes following the fixed fields (cbSize and any WAVEX extension)."""

    @classmethod
    def from_bytes(cls, data: bytes) -> "FormatRecord":
        """Unpack a fmt payload: 16 fixed bytes plus any extension."""
        return cls(*FMT_STRUCT.unpack_from(data), extension=bytes(data[FMT_FIELDS_SIZE:]))

    def to_bytes(self) -> bytes:
        """Pack the fixed fields, little-endian, followed by the extension."""
        fields = FMT_STRUCT.pack(
            self.audio_format,
            self.num_channels,
            self.sample_rate,
            self.byte_rate,
            self.block_align,
            self.bits_per_sample,
        )
        return fields + self.extension

    @property
    def sample_format(self) -> int:
        """Format tag describing the samples.

        For WAVE_FORMAT_EXTENSIBLE this is the tag embedded in the
        SubFormat GUID; otherwise it is ``audio_format``.
        """
        if self.audio_format == AudioFormat.EXTENSIBLE and len(self.extension) >= EXTENSIBLE_SIZE:
            return int.from_bytes(self.extension[SUBFORMAT_OFFSET : SUBFORMAT_OFFSET + 2], "little")
        return self.audio_format

    @property
    def format_name(self) -> str:
        known = AudioFormat.from_tag(self.audio_format)
        if known is None:
            return f"Unknown (0x{self.audio_format:04X})"
        return known.display_name


@dataclass(frozen=True)
class DataBlock:
    """Raw payload of the data chunk.

    The bytes are opaque; no sample layout is assumed.
    """

    data: bytes

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class WavDocument:
    """A decoded RIFF/WAVE file: container header, format record and data."""

    container: ContainerHeader
    """The outer header as it was declared in the source."""

    format: FormatRecord
    """The fmt chunk's fixed fields."""

    data: DataBlock
    """The data chunk payload."""

    warnings: tuple[str, ...] = field(default=(), compare=False)
    """Non-fatal anomalies found while decoding."""

    @property
    def num_frames(self) -> int:
        """Number of whole sample frames in the data chunk."""
        if self.format.block_align == 0:
            return 0
        return len(self.data) // self.format.block_align

    @property
    def duration_seconds(self) -> float:
        """Playback duration implied by the format record."""
        if self.format.sample_rate == 0:
            return 0.0
        return self.num_frames / self.format.sample_rate
