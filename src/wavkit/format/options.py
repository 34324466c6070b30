"""Decoder configuration."""

from dataclasses import dataclass
from enum import Enum

# Maximum file size accepted by load_wav (100 MB)
MAX_FILE_SIZE_BYTES = 100 * 1024 * 1024


class DuplicatePolicy(Enum):
    """Which instance is kept when a fmt or data chunk occurs twice."""

    FIRST = "first"
    """Keep the first decoded chunk."""

    LAST = "last"
    """Keep the most recently decoded chunk."""


@dataclass(frozen=True)
class DecodeOptions:
    """Options controlling how a RIFF/WAVE source is decoded."""

    duplicate_policy: DuplicatePolicy = DuplicatePolicy.FIRST
    """Resolution of repeated fmt/data chunks. Duplicates are always reported."""

    word_align: bool = True
    """Skip the pad byte that follows odd-sized chunk payloads."""

    max_file_size: int = MAX_FILE_SIZE_BYTES
    """Largest file load_wav will read."""

    max_data_size: int | None = None
    """Optional cap on the declared data chunk size, on top of the source bound."""

    def __post_init__(self) -> None:
        if self.max_file_size <= 0:
            raise ValueError(f"max_file_size must be > 0, got {self.max_file_size}")
        if self.max_data_size is not None and self.max_data_size < 0:
            raise ValueError(f"max_data_size must be >= 0, got {self.max_data_size}")
