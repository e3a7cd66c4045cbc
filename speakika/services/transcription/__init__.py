"""
Transcription module - Speech recognition and translation abstraction layer.

Factory function for creating transcriber instances based on provider configuration.
"""

from speakika.core.config import Settings, get_settings

from .base import BaseTranscriber

__all__ = ["BaseTranscriber", "create_transcriber"]


def create_transcriber(provider: str, settings: Settings | None = None, **kwargs) -> BaseTranscriber:
    """
    Factory function to create a transcriber based on provider.

    Args:
        provider: "mock", "http", or "whisper" ("local" is an alias)
        settings: Configuration source (defaults to get_settings())
        **kwargs: Provider-specific overrides

    Returns:
        BaseTranscriber implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    settings = settings or get_settings()
    if provider == "mock":
        from .mock import MockTranscriber

        kwargs.setdefault("delay", settings.mock_transcription_delay)
        return MockTranscriber(**kwargs)
    elif provider == "http":
        from .http import HttpTranscriber

        kwargs.setdefault("timeout", settings.speech_api_timeout)
        kwargs.setdefault("source_language", settings.source_language_code)
        return HttpTranscriber(settings.speech_api_url, **kwargs)
    elif provider == "whisper" or provider == "local":
        from .whisper import WhisperTranscriber

        return WhisperTranscriber(settings=settings, **kwargs)
    else:
        raise ValueError(f"Unknown transcription provider: {provider}")
