"""
Speech recognition endpoint.

``POST /api/transcribe`` accepts a raw sample array plus its rate and
answers with the recognized text as a bare JSON string. Transcription
errors propagate to the registered ``SpeakIkaError`` handler.
"""

import logging

import numpy as np
from fastapi import APIRouter, Depends

from speakika.api.dependencies import get_speech_transcriber
from speakika.core.models import SpeechRequest
from speakika.services.transcription import BaseTranscriber

logger = logging.getLogger(__name__)

router = APIRouter(tags=["speech"])


@router.post("/transcribe", response_model=str)
async def transcribe(
    body: SpeechRequest,
    transcriber: BaseTranscriber = Depends(get_speech_transcriber),
) -> str:
    """Recognize speech in the posted samples."""
    samples = np.asarray(body.speech_array, dtype=np.float32)
    logger.info(
        "Transcribing %d samples at %d Hz", samples.size, body.sampling_rate
    )
    result = await transcriber.transcribe(samples, body.sampling_rate)
    return result.source_text
