"""Transcriber that delegates to a remote speech endpoint.

Speaks the ``POST /api/transcribe`` contract: the body carries the raw
sample array and its rate, the JSON response body is the recognized text.
"""

import logging

import httpx
import numpy as np

from speakika.core.exceptions import NoSpeechDetectedError, SpeechServiceError
from speakika.core.models import SpeechRequest, TranscriptionResult
from speakika.services.transcription.base import BaseTranscriber

logger = logging.getLogger(__name__)


class HttpTranscriber(BaseTranscriber):
    """Calls a speech service over HTTP.

    Args:
        base_url: Root URL of the service (e.g. ``http://localhost:8000``).
        timeout: Request timeout in seconds.
        source_language: Language tag attached to results.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        source_language: str = "ika",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._source_language = source_language
        self._transport = transport

    async def transcribe(self, samples: np.ndarray, sample_rate: int) -> TranscriptionResult:
        body = SpeechRequest(
            speech_array=np.asarray(samples, dtype=np.float32).ravel().tolist(),
            sampling_rate=sample_rate,
        )
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post("/api/transcribe", json=body.model_dump())
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            raise SpeechServiceError(
                f"HTTP error! status: {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise SpeechServiceError(f"Speech service unreachable: {exc}") from exc
        except ValueError as exc:
            raise SpeechServiceError("Speech service returned invalid JSON") from exc

        if not isinstance(data, str):
            raise SpeechServiceError(f"Unexpected speech service response: {type(data).__name__}")
        if not data.strip():
            raise NoSpeechDetectedError()

        return TranscriptionResult(source_text=data.strip(), source_language=self._source_language)
