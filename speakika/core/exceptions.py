"""
Speak Ika exception hierarchy.

All application-specific exceptions inherit from SpeakIkaError,
enabling centralized error handling in the API middleware layer and
status-message conversion in the audio workbench.
"""

from datetime import UTC, datetime


class SpeakIkaError(Exception):
    """Base exception for all Speak Ika errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "SPEAKIKA_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------


class MicrophoneAccessError(SpeakIkaError):
    """Raised when microphone access is denied or capture is unsupported."""

    def __init__(self, detail: str = "Microphone access denied") -> None:
        super().__init__(detail=detail, code="MICROPHONE_ACCESS_ERROR", status_code=403)


class AudioDecodeError(SpeakIkaError):
    """Raised when audio bytes are malformed or in an unsupported format."""

    def __init__(self, detail: str = "Could not decode audio") -> None:
        super().__init__(detail=detail, code="AUDIO_DECODE_ERROR", status_code=422)


class PlaybackDeviceError(SpeakIkaError):
    """Raised when the output device refuses to start playback."""

    def __init__(self, detail: str = "Playback failed") -> None:
        super().__init__(detail=detail, code="PLAYBACK_DEVICE_ERROR", status_code=500)


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


class TranscriptionError(SpeakIkaError):
    """Raised when STT processing fails."""

    def __init__(
        self,
        detail: str = "Transcription failed",
        code: str = "TRANSCRIPTION_ERROR",
        status_code: int = 500,
    ) -> None:
        super().__init__(detail=detail, code=code, status_code=status_code)


class SpeechServiceError(TranscriptionError):
    """Raised when the speech service is unreachable or answers non-2xx."""

    def __init__(self, detail: str = "Speech service failed") -> None:
        super().__init__(detail=detail, code="SPEECH_SERVICE_ERROR", status_code=502)


class NoSpeechDetectedError(TranscriptionError):
    """Raised when transcription succeeds but recognizes no speech."""

    def __init__(self, detail: str = "No speech detected") -> None:
        super().__init__(detail=detail, code="NO_SPEECH_DETECTED", status_code=422)


class MockDataUnavailableError(TranscriptionError):
    """Raised when the mock transcriber has no placeholder results."""

    def __init__(self) -> None:
        super().__init__(
            detail="No sample transcription available",
            code="MOCK_DATA_UNAVAILABLE",
            status_code=503,
        )


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


class UserNotFoundError(SpeakIkaError):
    """Raised when a user ID does not exist."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            detail=f"User not found: {user_id}",
            code="USER_NOT_FOUND",
            status_code=404,
        )


class ContributionNotFoundError(SpeakIkaError):
    """Raised when a contribution ID does not exist."""

    def __init__(self, contribution_id: str) -> None:
        super().__init__(
            detail=f"Contribution not found: {contribution_id}",
            code="CONTRIBUTION_NOT_FOUND",
            status_code=404,
        )


class TranscriptNotFoundError(SpeakIkaError):
    """Raised when a transcript ID does not exist."""

    def __init__(self, transcript_id: str) -> None:
        super().__init__(
            detail=f"Transcript not found: {transcript_id}",
            code="TRANSCRIPT_NOT_FOUND",
            status_code=404,
        )


class DuplicateTranscriptError(SpeakIkaError):
    """Raised when a contribution already has a transcript in that language."""

    def __init__(self, contribution_id: str, language_code: str) -> None:
        super().__init__(
            detail=(
                f"Contribution {contribution_id} already has a "
                f"transcript in {language_code!r}"
            ),
            code="DUPLICATE_TRANSCRIPT",
            status_code=409,
        )


class DuplicateTranslationError(SpeakIkaError):
    """Raised when a transcript already has a translation into that language."""

    def __init__(self, transcript_id: str, target_language_code: str) -> None:
        super().__init__(
            detail=(
                f"Transcript {transcript_id} already has a "
                f"translation into {target_language_code!r}"
            ),
            code="DUPLICATE_TRANSLATION",
            status_code=409,
        )


class InvalidStatusError(SpeakIkaError):
    """Raised for a contribution status outside the allowed set."""

    def __init__(self, status: str) -> None:
        super().__init__(
            detail=f"Invalid contribution status: {status}",
            code="INVALID_STATUS",
            status_code=400,
        )
