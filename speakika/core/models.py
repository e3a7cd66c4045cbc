"""
Pydantic v2 request / response models and closed label sets.

Health, database check, speech endpoint, transcription results, and the
status / sentiment / emotion vocabularies shared by the ORM layer.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


class ContributionStatus(StrEnum):
    """Processing states for a submitted contribution."""

    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"


class SentimentLabel(StrEnum):
    """Sentiment attached to a translation."""

    positive = "positive"
    neutral = "neutral"
    negative = "negative"


class EmotionLabel(StrEnum):
    """Plutchik emotions plus neutral, attached to a translation."""

    joy = "joy"
    trust = "trust"
    fear = "fear"
    surprise = "surprise"
    sadness = "sadness"
    disgust = "disgust"
    anger = "anger"
    anticipation = "anticipation"
    neutral = "neutral"


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


class DbCheckSuccess(BaseModel):
    """GET /api/db-check response when the store answered."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    timestamp: str
    round_trip_ms: int = Field(ge=0, alias="roundTripMs")


class DbCheckFailure(BaseModel):
    """GET /api/db-check response when the query raised."""

    ok: bool = False
    error: str


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


class SpeechRequest(BaseModel):
    """POST /api/transcribe request body."""

    speech_array: list[float]
    sampling_rate: int = Field(gt=0)


class TranscriptionResult(BaseModel):
    """Recognized source text and its translation."""

    source_text: str
    target_text: str = ""
    source_language: str = "ika"
    target_language: str = "en"
    confidence: float | None = None
