"""Shared pytest fixtures for the Speak Ika test suite.

Provides synthetic audio (raw PCM and encoded WAV), an in-memory
database with the schema created, a repository bound to it, and a mock
transcriber.
"""

import io
import struct
import wave
from unittest.mock import AsyncMock

import pytest

# ---------------------------------------------------------------------------
# Transcription Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_transcriber():
    """Create a mock transcriber for unit testing.

    Returns:
        AsyncMock: A mock implementing the BaseTranscriber interface with a
        default Ika/English result.
    """
    from speakika.core.models import TranscriptionResult
    from speakika.services.transcription.base import BaseTranscriber

    transcriber = AsyncMock(spec=BaseTranscriber)
    transcriber.transcribe.return_value = TranscriptionResult(
        source_text="Ugbu a ka anyi na lekwasi okwu a anya.",
        target_text="Right now we are paying attention to this speech.",
    )
    return transcriber


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


def _sine_pcm(seconds: float = 1.0, sample_rate: int = 16000, channels: int = 1) -> bytes:
    import math

    frequency = 440.0
    amplitude = 16000  # ~50% of max int16
    frames = []
    for i in range(int(sample_rate * seconds)):
        value = int(amplitude * math.sin(2 * math.pi * frequency * i / sample_rate))
        frames.append(struct.pack("<h", value) * channels)
    return b"".join(frames)


def _make_wav_bytes(pcm: bytes, sample_rate: int = 16000, channels: int = 1) -> bytes:
    """Wrap 16-bit PCM frames in a WAV container."""
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm)
    return buf.getvalue()


@pytest.fixture
def make_wav():
    """Factory wrapping raw 16-bit PCM in a WAV container: ``make_wav(pcm, rate, channels)``."""
    return _make_wav_bytes


@pytest.fixture
def sample_pcm_bytes():
    """Generate 1 second of 440Hz sine-wave PCM audio (16kHz, 16-bit, mono).

    Returns:
        bytes: Raw PCM audio data.
    """
    return _sine_pcm()


@pytest.fixture
def sample_wav_bytes(sample_pcm_bytes):
    """The 440Hz sine as an encoded mono WAV file."""
    return _make_wav_bytes(sample_pcm_bytes)


@pytest.fixture
def stereo_wav_bytes():
    """Half a second of 440Hz sine in both channels of a 44.1kHz WAV file."""
    return _make_wav_bytes(_sine_pcm(0.5, 44100, channels=2), sample_rate=44100, channels=2)


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def database():
    """In-memory Database with all tables created, disposed after the test."""
    from speakika.services.storage import Database

    db = Database(url="sqlite+aiosqlite:///:memory:")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def db_session(database):
    """Yield an AsyncSession bound to the test database; rolls back after test."""
    from sqlalchemy.ext.asyncio import async_sessionmaker

    factory = async_sessionmaker(database.engine, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def repository(db_session):
    """Return a ContributionRepository bound to the test session."""
    from speakika.services.storage.repository import ContributionRepository

    return ContributionRepository(db_session)
