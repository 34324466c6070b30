import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import numpy as np
from cyclopts import App, Parameter
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from wavkit.cli.validators import validate_positive_integer, validate_wav_suffix
from wavkit.format import (
    DecodeOptions,
    DuplicatePolicy,
    RiffError,
    WavDocument,
    decode_samples,
    document_from_samples,
    load_wav,
    save_wav,
    validate_document,
)
from wavkit.playback import PlaybackError, SoundDevicePlayback, play_document

app = App(name="wavkit", help="A utility for inspecting, repairing and playing WAV files")
console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(message, style="bold red")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(message, style="bold green")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(message, style="bold yellow")


def print_json(data: object) -> None:
    console.print(json.dumps(data, indent=2), markup=False, highlight=False, soft_wrap=True)


def configure_logging(verbose: bool) -> None:
    """Route wavkit log records through rich.

    Decode warnings are printed from the document itself, so only errors
    are logged unless ``verbose`` is set.
    """
    logger = logging.getLogger("wavkit")
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=err_console, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.ERROR)


def build_options(last_wins: bool, word_align: bool, max_size_mb: int | None) -> DecodeOptions:
    policy = DuplicatePolicy.LAST if last_wins else DuplicatePolicy.FIRST
    if max_size_mb is None:
        return DecodeOptions(duplicate_policy=policy, word_align=word_align)
    return DecodeOptions(
        duplicate_policy=policy,
        word_align=word_align,
        max_file_size=max_size_mb * 1024 * 1024,
    )


def document_summary(file: Path, document: WavDocument) -> dict[str, object]:
    fmt = document.format
    return {
        "file": str(file),
        "riff_size": document.container.size,
        "format": {
            "audio_format": fmt.audio_format,
            "format_name": fmt.format_name,
            "num_channels": fmt.num_channels,
            "sample_rate": fmt.sample_rate,
            "byte_rate": fmt.byte_rate,
            "block_align": fmt.block_align,
            "bits_per_sample": fmt.bits_per_sample,
        },
        "data_size": len(document.data),
        "num_frames": document.num_frames,
        "duration_seconds": document.duration_seconds,
        "warnings": list(document.warnings),
    }


@app.command
def info(
    file: Path,
    output_json: Annotated[bool, Parameter(name=["--json"])] = False,
    last_wins: bool = False,
    word_align: bool = True,
    verbose: bool = False,
) -> int:
    """
    Display the RIFF header, format record and data size of a WAV file.

    Parameters
    ----------
    file: Path
        The path to the .wav file
    output_json: bool
        Output results as JSON (default: False)
    last_wins: bool
        Keep the last fmt/data chunk when duplicates occur (default: first)
    word_align: bool
        Skip the pad byte after odd-sized chunks (default: True)
    verbose: bool
        Log every chunk visited while decoding
    """
    configure_logging(verbose)

    try:
        document = load_wav(file, build_options(last_wins, word_align, None))
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    summary = document_summary(file, document)
    if output_json:
        print_json(summary)
        return 0

    fmt = document.format
    console.print(f"[bold]WAV file: {file}[/bold]")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Chunk", justify="left")
    table.add_column("Field", justify="left")
    table.add_column("Value", justify="right")
    table.add_row("RIFF", "size", str(document.container.size))
    table.add_row("fmt ", "audio format", fmt.format_name)
    table.add_row("", "channels", str(fmt.num_channels))
    table.add_row("", "sample rate", f"{fmt.sample_rate} Hz")
    table.add_row("", "byte rate", str(fmt.byte_rate))
    table.add_row("", "block align", str(fmt.block_align))
    table.add_row("", "bits per sample", str(fmt.bits_per_sample))
    table.add_row("data", "size", f"{len(document.data):,}")
    console.print(table)

    console.print(f"  Frames: {document.num_frames:,}")
    console.print(f"  Duration: {document.duration_seconds:.3f}s")

    try:
        samples = decode_samples(document)
    except ValueError:
        samples = None
    if samples is not None and samples.size:
        for channel in range(samples.shape[1]):
            rms = np.sqrt(np.mean(samples[:, channel] ** 2))
            console.print(f"  Channel {channel + 1}: RMS={rms:.3f}")

    for warning in document.warnings:
        print_warning(f"  [WARN] {warning}")

    return 0


@app.command
def validate(
    file: Path,
    strict: bool = False,
    output_json: Annotated[bool, Parameter(name=["--json"])] = False,
    last_wins: bool = False,
    word_align: bool = True,
    verbose: bool = False,
) -> int:
    """
    Validate a WAV file.

    Checks the RIFF structure, presence of fmt and data chunks, and
    consistency of the format record with the payload.

    Parameters
    ----------
    file: Path
        The path to the .wav file to validate
    strict: bool
        Treat warnings as errors (default: False)
    output_json: bool
        Output results as JSON (default: False)
    last_wins: bool
        Keep the last fmt/data chunk when duplicates occur (default: first)
    word_align: bool
        Skip the pad byte after odd-sized chunks (default: True)
    verbose: bool
        Log every chunk visited while decoding
    """
    configure_logging(verbose)
    results: dict[str, object] = {
        "file": str(file),
        "valid": True,
        "errors": [],
        "warnings": [],
    }

    try:
        document = load_wav(file, build_options(last_wins, word_align, None))
    except RiffError as e:
        results["valid"] = False
        results["errors"] = [f"{type(e).__name__}: {e}"]
        if output_json:
            print_json(results)
        else:
            print_error(f"[FAIL] {file}")
            console.print(f"  {type(e).__name__}: {e}")
        return 1

    result = validate_document(document)
    errors = list(result.errors)
    warnings = list(result.warnings)

    # In strict mode, warnings become errors
    if strict and warnings:
        errors.extend(f"Strict mode: {w}" for w in warnings)

    results["valid"] = not errors
    results["errors"] = errors
    results["warnings"] = warnings

    if output_json:
        print_json(results)
        return 0 if results["valid"] else 1

    if results["valid"]:
        print_success(f"[PASS] {file}")
        console.print(f"  Format: {document.format.format_name}")
        console.print(f"  Channels: {document.format.num_channels}")
        console.print(f"  Sample rate: {document.format.sample_rate} Hz")
        console.print(f"  Frames: {document.num_frames:,}")
        if warnings:
            console.print("")
            for warning in warnings:
                print_warning(f"  [WARN] {warning}")
    else:
        print_error(f"[FAIL] {file}")
        for error in errors:
            console.print(f"  {error}")

    return 0 if results["valid"] else 1


@app.command
def rewrite(
    source: Path,
    output: Annotated[Path, Parameter(validator=validate_wav_suffix)],
    last_wins: bool = False,
    word_align: bool = True,
    verbose: bool = False,
) -> int:
    """
    Decode a WAV file and write it back with recomputed lengths.

    Unknown chunks are dropped; the fmt extension is kept.

    Parameters
    ----------
    source: Path
        The WAV file to read
    output: Path
        Destination for the rewritten file
    last_wins: bool
        Keep the last fmt/data chunk when duplicates occur (default: first)
    word_align: bool
        Skip pad bytes on input and write them on output (default: True)
    verbose: bool
        Log every chunk visited while decoding
    """
    configure_logging(verbose)

    try:
        document = load_wav(source, build_options(last_wins, word_align, None))
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    try:
        save_wav(output, document, word_align=word_align)
    except OSError as e:
        print_error(f"Error writing output: {e}")
        return 1

    print_success(f"Rewrote {source} -> {output}")
    console.print(f"  RIFF size: {document.container.size} -> {output.stat().st_size - 8}")
    for warning in document.warnings:
        print_warning(f"  [WARN] {warning}")
    return 0


@app.command
def tone(
    output: Annotated[Path, Parameter(validator=validate_wav_suffix)] = Path("tone.wav"),
    frequency: float = 440.0,
    seconds: float = 1.0,
    sample_rate: Annotated[int, Parameter(validator=validate_positive_integer)] = 44100,
    bits: int = 16,
    channels: Annotated[int, Parameter(validator=validate_positive_integer)] = 1,
    amplitude: float = 0.5,
    verbose: bool = False,
) -> int:
    """
    Write a sine test tone.

    Parameters
    ----------
    output: Path
        The output destination for the .wav file
    frequency: float
        Tone frequency in Hz
    seconds: float
        Tone length in seconds
    sample_rate: int
        The sample rate in Hz
    bits: int
        Bit depth: 8, 16, 24 (PCM) or 32 (float)
    channels: int
        Number of identical channels
    amplitude: float
        Peak amplitude in [0, 1]
    verbose: bool
        Log encoder details
    """
    configure_logging(verbose)

    num_frames = int(round(seconds * sample_rate))
    t = np.arange(num_frames) / sample_rate
    wave = amplitude * np.sin(2 * np.pi * frequency * t)
    samples = np.repeat(wave[:, np.newaxis], channels, axis=1)

    try:
        document = document_from_samples(samples, sample_rate, bits_per_sample=bits)
    except ValueError as e:
        print_error(f"Error: {e}")
        return 1

    try:
        save_wav(output, document)
    except OSError as e:
        print_error(f"Error writing output: {e}")
        return 1

    console.print(f"Wrote {num_frames:,} frames of {frequency} Hz to {output}")
    return 0


@app.command
def play(
    file: Path,
    last_wins: bool = False,
    word_align: bool = True,
    max_size_mb: Annotated[int | None, Parameter(validator=validate_positive_integer)] = None,
    verbose: bool = False,
) -> int:
    """
    Play a WAV file through the default output device.

    The file is decoded and re-encoded before playback, so files with
    broken length fields still play.

    Parameters
    ----------
    file: Path
        The WAV file to play
    last_wins: bool
        Keep the last fmt/data chunk when duplicates occur (default: first)
    word_align: bool
        Skip the pad byte after odd-sized chunks (default: True)
    max_size_mb: int | None
        Refuse files larger than this many megabytes (default: 100)
    verbose: bool
        Log every chunk visited while decoding
    """
    configure_logging(verbose)

    try:
        document = load_wav(file, build_options(last_wins, word_align, max_size_mb))
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    console.print(f"Playing {file} ({document.duration_seconds:.2f}s)...")
    try:
        play_document(document, SoundDevicePlayback())
    except PlaybackError as e:
        print_error(f"Error: {e}")
        return 1

    return 0


def main() -> None:
    sys.exit(app())


if __name__ == "__main__":
    main()
