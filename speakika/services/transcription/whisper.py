"""Whisper transcriber using faster-whisper.

Runs the model twice per request: once with ``task="transcribe"`` for the
source-language text and once with ``task="translate"`` for English. The
WhisperModel is loaded lazily and cached at module level to avoid repeated
initialization overhead.
"""

import asyncio
import logging
import math

import numpy as np
from faster_whisper import WhisperModel

from speakika.core.config import get_settings
from speakika.core.exceptions import NoSpeechDetectedError, SpeechServiceError
from speakika.core.models import TranscriptionResult
from speakika.services.audio.processor import AudioProcessor
from speakika.services.transcription.base import BaseTranscriber

logger = logging.getLogger(__name__)

_model_cache: WhisperModel | None = None


class WhisperTranscriber(BaseTranscriber):
    """Speech-to-text and speech-to-English via faster-whisper (CTranslate2).

    Args:
        model_size: Whisper model size (tiny, base, small, medium, large-v3).
        device: Computation device ("cpu" or "cuda").
        compute_type: CTranslate2 compute type ("int8", "float16", etc.).
        language: Source language hint; None lets Whisper detect it.
        settings: Optional Settings instance (defaults to get_settings()).
    """

    def __init__(
        self,
        model_size: str | None = None,
        device: str | None = None,
        compute_type: str | None = None,
        language: str | None = None,
        settings=None,
    ) -> None:
        self._settings = settings or get_settings()
        self._model_size = model_size or self._settings.whisper_model
        self._device = device or self._settings.whisper_device
        self._compute_type = compute_type or self._settings.whisper_compute_type
        self._language = language
        self._processor = AudioProcessor()

    def _get_model(self) -> WhisperModel:
        """Return the cached WhisperModel, loading it on first use."""
        global _model_cache  # noqa: PLW0603
        if _model_cache is None:
            logger.info(
                "Loading Whisper model: %s (device=%s, compute=%s)",
                self._model_size,
                self._device,
                self._compute_type,
            )
            _model_cache = WhisperModel(
                self._model_size,
                device=self._device,
                compute_type=self._compute_type,
            )
        return _model_cache

    def _run(self, audio: np.ndarray, task: str) -> tuple[list, object]:
        """Run one synchronous pass (CPU-bound, call via asyncio.to_thread).

        The segment iterator is materialized here to avoid CTranslate2
        cross-thread issues.
        """
        model = self._get_model()
        segments_iter, info = model.transcribe(
            audio,
            language=self._language,
            task=task,
            beam_size=5,
            vad_filter=True,
        )
        return list(segments_iter), info

    @staticmethod
    def _logprob_to_confidence(avg_logprob: float) -> float:
        """Convert average log probability to a 0-1 confidence score."""
        return max(0.0, min(1.0, math.exp(avg_logprob)))

    @staticmethod
    def _join(segments) -> str:
        return " ".join(seg.text.strip() for seg in segments if seg.text.strip())

    async def transcribe(self, samples: np.ndarray, sample_rate: int) -> TranscriptionResult:
        audio = self._processor.resample(samples, sample_rate)
        try:
            segments, info = await asyncio.to_thread(self._run, audio, "transcribe")
            source_text = self._join(segments)
            if not source_text:
                raise NoSpeechDetectedError()
            translated, _ = await asyncio.to_thread(self._run, audio, "translate")
        except NoSpeechDetectedError:
            raise
        except Exception as exc:
            raise SpeechServiceError(f"Whisper transcription failed: {exc}") from exc

        spoken = [s for s in segments if s.text.strip()]
        avg_logprob = sum(s.avg_logprob for s in spoken) / len(spoken)
        return TranscriptionResult(
            source_text=source_text,
            target_text=self._join(translated),
            source_language=info.language or self._language or "unknown",
            target_language="en",
            confidence=self._logprob_to_confidence(avg_logprob),
        )
