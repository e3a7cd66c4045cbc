"""Placeholder transcriber returning canned Ika/English sentence pairs.

Stands in for real speech recognition and machine translation: waits a
fixed delay, then picks one pair at random. The audio is never analysed.
"""

import asyncio
import logging
import random
from dataclasses import dataclass

import numpy as np

from speakika.core.exceptions import MockDataUnavailableError
from speakika.core.models import TranscriptionResult
from speakika.services.transcription.base import BaseTranscriber

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MockPair:
    ika: str
    english: str


MOCK_RESULTS: tuple[MockPair, ...] = (
    MockPair(
        ika="Ugbu a ka anyi na lekwasi okwu a anya.",
        english="Right now we are paying attention to this speech.",
    ),
    MockPair(
        ika="Kpoo mu na nso ka anyi kwuo maka oru a.",
        english="Call me nearby so we can discuss this task.",
    ),
    MockPair(
        ika="Biko nye anyi okwu gi ka anyi mee ka o doo anya.",
        english="Please share your words so we can make it clear.",
    ),
)


class MockTranscriber(BaseTranscriber):
    """Returns one of ``results`` after ``delay`` seconds.

    Args:
        delay: Seconds to wait before answering.
        results: Candidate pairs; an empty set makes every call fail.
        rng: Random source (seed it for reproducible picks).
    """

    def __init__(
        self,
        delay: float = 1.5,
        results: tuple[MockPair, ...] = MOCK_RESULTS,
        rng: random.Random | None = None,
    ) -> None:
        self._delay = delay
        self._results = tuple(results)
        self._rng = rng or random.Random()

    async def transcribe(self, samples: np.ndarray, sample_rate: int) -> TranscriptionResult:
        await asyncio.sleep(self._delay)
        if not self._results:
            raise MockDataUnavailableError()
        pair = self._rng.choice(self._results)
        logger.debug("Mock transcription picked %r", pair.ika)
        return TranscriptionResult(source_text=pair.ika, target_text=pair.english)
