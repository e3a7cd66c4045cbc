"""FastAPI dependencies resolving app-owned resources from ``app.state``."""

from fastapi import Request

from speakika.services.storage.database import Database
from speakika.services.transcription import BaseTranscriber, create_transcriber


def get_database(request: Request) -> Database:
    """Return the ``Database`` constructed by the app factory."""
    return request.app.state.database


def get_speech_transcriber(request: Request) -> BaseTranscriber:
    """Return the server-side transcriber, creating it on first use."""
    state = request.app.state
    if state.speech_transcriber is None:
        settings = state.settings
        state.speech_transcriber = create_transcriber(settings.speech_transcriber, settings)
    return state.speech_transcriber
