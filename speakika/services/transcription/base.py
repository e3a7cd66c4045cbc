"""
Abstract base class for speech recognition + translation providers.

All transcribers (mock, HTTP speech service, local Whisper) implement this
interface, so the workbench and the speech endpoint stay provider-agnostic.
"""

from abc import ABC, abstractmethod

import numpy as np

from speakika.core.models import TranscriptionResult


class BaseTranscriber(ABC):
    """Interface that every transcription provider must implement."""

    @abstractmethod
    async def transcribe(self, samples: np.ndarray, sample_rate: int) -> TranscriptionResult:
        """Recognize speech in ``samples`` and translate it.

        Args:
            samples: 1-D float32 array in [-1.0, 1.0].
            sample_rate: Samples per second of ``samples``.

        Returns:
            TranscriptionResult with source text, target text, and confidence.

        Raises:
            SpeechServiceError: Transport or service failure.
            NoSpeechDetectedError: The audio contains no recognizable speech.
        """
