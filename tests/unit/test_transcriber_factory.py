"""Tests for the create_transcriber() provider factory."""

import pytest

from speakika.core.config import Settings
from speakika.services.transcription import create_transcriber
from speakika.services.transcription.http import HttpTranscriber
from speakika.services.transcription.mock import MockTranscriber
from speakika.services.transcription.whisper import WhisperTranscriber


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        mock_transcription_delay=0.25,
        speech_api_url="http://speech.test",
        speech_api_timeout=5.0,
        whisper_model="tiny",
    )


def test_mock_uses_configured_delay(settings):
    transcriber = create_transcriber("mock", settings)
    assert isinstance(transcriber, MockTranscriber)
    assert transcriber._delay == 0.25


def test_mock_override(settings):
    assert create_transcriber("mock", settings, delay=0)._delay == 0


def test_http(settings):
    transcriber = create_transcriber("http", settings)
    assert isinstance(transcriber, HttpTranscriber)
    assert transcriber._base_url == "http://speech.test"
    assert transcriber._timeout == 5.0


@pytest.mark.parametrize("provider", ["whisper", "local"])
def test_whisper(settings, provider):
    transcriber = create_transcriber(provider, settings)
    assert isinstance(transcriber, WhisperTranscriber)
    assert transcriber._model_size == "tiny"


def test_unknown_provider(settings):
    with pytest.raises(ValueError, match="Unknown transcription provider"):
        create_transcriber("nope", settings)
