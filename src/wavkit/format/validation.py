"""Consistency checks for decoded WAV documents.

Decoding only enforces the container structure. These checks look at the
format record and payload length and report fields that disagree with
each other, which is common in files written by careless encoders.
"""

from dataclasses import dataclass

from wavkit.format.types import AudioFormat, WavDocument

_LINEAR_FORMATS = (AudioFormat.PCM, AudioFormat.IEEE_FLOAT)


class ValidationError(Exception):
    """Error during document validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


@dataclass
class ValidationResult:
    """Result of validation with optional warnings."""

    valid: bool
    errors: list[str]
    warnings: list[str]

    @classmethod
    def success(cls, warnings: list[str] | None = None) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(valid=True, errors=[], warnings=warnings or [])

    @classmethod
    def failure(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        """Create a failed validation result."""
        return cls(valid=False, errors=errors, warnings=warnings or [])

    def raise_for_errors(self) -> None:
        """Raise ValidationError with the first error, if any."""
        if self.errors:
            raise ValidationError(self.errors[0])


def validate_document(document: WavDocument) -> ValidationResult:
    """Validate a document's format record against its payload.

    Errors:
    - num_channels, sample_rate and block_align must be > 0

    Warnings:
    - unknown format tag
    - byte_rate != sample_rate * block_align
    - block_align != num_channels * bytes per sample (PCM and float only)
    - data length not a whole number of frames
    - anomalies recorded while decoding

    Args:
        document: The decoded document.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = list(document.warnings)
    fmt = document.format

    if fmt.num_channels == 0:
        errors.append("num_channels must be > 0")
    if fmt.sample_rate == 0:
        errors.append("sample_rate must be > 0")
    if fmt.block_align == 0:
        errors.append("block_align must be > 0")

    known = AudioFormat.from_tag(fmt.audio_format)
    if known is None:
        warnings.append(f"Unknown audio format tag 0x{fmt.audio_format:04X}")

    if fmt.byte_rate != fmt.sample_rate * fmt.block_align:
        warnings.append(
            f"byte_rate ({fmt.byte_rate}) does not match "
            f"sample_rate * block_align ({fmt.sample_rate * fmt.block_align})"
        )

    if fmt.sample_format in _LINEAR_FORMATS:
        expected_align = fmt.num_channels * ((fmt.bits_per_sample + 7) // 8)
        if fmt.block_align != expected_align:
            warnings.append(
                f"block_align ({fmt.block_align}) does not match "
                f"num_channels * bytes per sample ({expected_align})"
            )

    if fmt.block_align and len(document.data) % fmt.block_align:
        warnings.append(
            f"data length ({len(document.data)}) is not a multiple of "
            f"block_align ({fmt.block_align})"
        )

    if errors:
        return ValidationResult.failure(errors, warnings)
    return ValidationResult.success(warnings)
