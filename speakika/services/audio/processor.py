"""Audio decoding and resampling.

Turns encoded audio bytes (uploads, microphone captures) into a
multi-channel float32 sample buffer, and resamples mono audio for
speech models.
"""

import io
import logging
from dataclasses import dataclass

import numpy as np
import soundfile as sf
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from speakika.core.exceptions import AudioDecodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedAudio:
    """A decoded sample buffer.

    Attributes:
        samples: Float32 array shaped ``(channels, frames)`` in [-1.0, 1.0].
        sample_rate: Frames per second.
    """

    samples: np.ndarray
    sample_rate: int

    @property
    def channel_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def frame_count(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return self.frame_count / self.sample_rate if self.sample_rate else 0.0

    def get_channel_data(self, channel: int) -> np.ndarray:
        """Return the samples of one channel as a 1-D float32 array."""
        if not 0 <= channel < self.channel_count:
            raise IndexError(f"Channel {channel} out of range (0..{self.channel_count - 1})")
        return self.samples[channel]

    def to_mono(self) -> np.ndarray:
        """Average all channels into one."""
        return self.samples.mean(axis=0).astype(np.float32)


class AudioProcessor:
    """Decodes encoded audio and resamples it for speech models.

    Encoded bytes are read with soundfile (libsndfile) first; containers it
    cannot parse (WebM, M4A, ...) go through pydub, which shells out to ffmpeg.
    """

    def __init__(self, sample_rate: int = 16000) -> None:
        """Initialize the audio processor.

        Args:
            sample_rate: Target rate for ``resample`` in Hz (default: 16 kHz).
        """
        self.sample_rate = sample_rate

    def decode(self, data: bytes) -> DecodedAudio:
        """Decode encoded audio bytes into a sample buffer.

        Args:
            data: Complete encoded audio file contents.

        Returns:
            DecodedAudio with at least one channel.

        Raises:
            AudioDecodeError: If the bytes are empty, malformed, or unsupported.
        """
        if not data:
            raise AudioDecodeError("Audio data is empty")

        try:
            frames, sample_rate = sf.read(io.BytesIO(data), dtype="float32", always_2d=True)
        except (sf.LibsndfileError, RuntimeError, TypeError) as exc:
            logger.debug("soundfile could not read audio (%s), trying pydub", exc)
            return self._decode_with_pydub(data)

        return self._build(frames.T, sample_rate)

    def _decode_with_pydub(self, data: bytes) -> DecodedAudio:
        try:
            segment = AudioSegment.from_file(io.BytesIO(data))
        except (CouldntDecodeError, OSError, IndexError, KeyError, ValueError) as exc:
            raise AudioDecodeError(f"Unsupported or malformed audio: {exc}") from exc

        raw = np.array(segment.get_array_of_samples(), dtype=np.float32)
        # Interleaved integers -> (channels, frames) floats in [-1.0, 1.0]
        full_scale = float(1 << (8 * segment.sample_width - 1))
        samples = raw.reshape(-1, segment.channels).T / full_scale
        return self._build(samples, segment.frame_rate)

    @staticmethod
    def _build(samples: np.ndarray, sample_rate: int) -> DecodedAudio:
        samples = np.ascontiguousarray(samples, dtype=np.float32)
        if samples.ndim != 2 or samples.shape[0] < 1 or samples.shape[1] == 0:
            raise AudioDecodeError("Decoded audio contains no samples")
        return DecodedAudio(samples=samples, sample_rate=int(sample_rate))

    def resample(self, audio: np.ndarray, source_rate: int) -> np.ndarray:
        """Linearly resample mono float audio to ``self.sample_rate``."""
        audio = np.asarray(audio, dtype=np.float32)
        if source_rate == self.sample_rate or len(audio) == 0:
            return audio
        num_samples = int(len(audio) / source_rate * self.sample_rate)
        indices = np.linspace(0, len(audio) - 1, num_samples)
        return np.interp(indices, np.arange(len(audio)), audio).astype(np.float32)
