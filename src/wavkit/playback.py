"""Playback of encoded WAV buffers.

Sending audio to an output device is outside the codec. This module
defines the interface the codec hands buffers to, plus an adapter built on
soundfile (decoding) and sounddevice (output).

Example Usage
-------------
>>> from wavkit.format import load_wav
>>> from wavkit.playback import SoundDevicePlayback, play_document
>>> play_document(load_wav("tune.wav"), SoundDevicePlayback())  # doctest: +SKIP
"""

import io
import logging
from typing import Any, Protocol

import soundfile as sf

from wavkit.format.types import WavDocument
from wavkit.format.writer import encode_wav

logger = logging.getLogger(__name__)


class PlaybackError(Exception):
    """Error playing an audio buffer."""


class Playback(Protocol):
    """Something that can play a complete WAV file held in memory."""

    def play_from_buffer(self, buffer: bytes) -> None:
        """Play ``buffer``; raise PlaybackError on failure."""
        ...


def play_document(document: WavDocument, playback: Playback) -> None:
    """Encode a document and hand the buffer to ``playback``."""
    buffer = encode_wav(document)
    logger.debug("Handing %d byte buffer to %s", len(buffer), type(playback).__name__)
    playback.play_from_buffer(buffer)


class SoundDevicePlayback:
    """Play WAV buffers through the default output device."""

    def __init__(self, blocking: bool = True, device: int | str | None = None) -> None:
        self.blocking = blocking
        self.device = device

    def play_from_buffer(self, buffer: bytes) -> None:
        try:
            data, sample_rate = sf.read(io.BytesIO(buffer), dtype="float32")
        except RuntimeError as e:
            raise PlaybackError(f"Cannot decode buffer for playback: {e}") from e

        sd = _load_sounddevice()
        try:
            sd.play(data, sample_rate, blocking=self.blocking, device=self.device)
        except (sd.PortAudioError, ValueError) as e:
            raise PlaybackError(f"Audio output failed: {e}") from e


def _load_sounddevice() -> Any:
    """Import sounddevice on first use; it needs PortAudio at import time."""
    try:
        import sounddevice
    except (ImportError, OSError) as e:
        raise PlaybackError(
            "Playback requires the 'sounddevice' package and PortAudio "
            "(pip install 'wavkit[playback]')"
        ) from e
    return sounddevice
