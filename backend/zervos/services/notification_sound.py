"""Audible cue for new notifications.

The configured sound asset is played when it can be loaded; otherwise a short
synthesized sine tone is played so a cue is never skipped for lack of an asset.
"""

from __future__ import annotations

import io
import logging
import math
import struct
import wave
from pathlib import Path
from typing import Protocol

from zervos.core.config import settings

logger = logging.getLogger(__name__)

TONE_FREQUENCY_HZ = 800.0
TONE_DURATION_SECONDS = 0.5
TONE_START_GAIN = 0.3
TONE_END_GAIN = 0.01
SAMPLE_RATE = 22050


class AudioSink(Protocol):
    def play(self, audio: bytes) -> None: ...


class LoggingAudioSink:
    """Sink for headless contexts: records that a cue would have played."""

    def play(self, audio: bytes) -> None:
        logger.debug("Playing notification cue (%d bytes)", len(audio))


def synthesize_tone(
    frequency: float = TONE_FREQUENCY_HZ,
    duration: float = TONE_DURATION_SECONDS,
    start_gain: float = TONE_START_GAIN,
    end_gain: float = TONE_END_GAIN,
    sample_rate: int = SAMPLE_RATE,
) -> bytes:
    """Return a mono 16-bit WAV sine tone whose gain decays exponentially."""
    frames = int(sample_rate * duration)
    ratio = end_gain / start_gain
    samples = bytearray()
    for i in range(frames):
        t = i / sample_rate
        gain = start_gain * ratio ** (t / duration)
        value = gain * math.sin(2 * math.pi * frequency * t)
        samples += struct.pack("<h", int(value * 32767))

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(bytes(samples))
    return buffer.getvalue()


class NotificationSound:
    def __init__(self, asset_path: str | Path | None = None, sink: AudioSink | None = None):
        self.asset_path = Path(asset_path or settings.NOTIFICATION_SOUND_PATH)
        self.sink = sink or LoggingAudioSink()
        self._fallback: bytes | None = None

    def play(self) -> bool:
        """Play the cue. Returns False only when both asset and fallback failed."""
        try:
            self.sink.play(self.asset_path.read_bytes())
            return True
        except Exception as e:
            logger.debug("Notification sound %s unavailable (%s), using tone", self.asset_path, e)

        try:
            if self._fallback is None:
                self._fallback = synthesize_tone()
            self.sink.play(self._fallback)
            return True
        except Exception:
            logger.warning("Failed to play notification sound", exc_info=True)
            return False
