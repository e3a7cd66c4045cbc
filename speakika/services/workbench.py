"""
Audio workbench: capture or upload → decode → visualize → transcribe.

``AudioWorkbench`` owns the transient state of one user's session (the
decoded buffer, the playable reference, the live recording, the latest
transcript and translation, and a human-readable status line). Every
failure is caught here and turned into a status message; nothing is
persisted.

States:
    recording: idle ⇄ recording
    transcription: idle → pending → complete | error → idle
"""

import logging

from speakika.core.exceptions import (
    AudioDecodeError,
    MicrophoneAccessError,
    MockDataUnavailableError,
    NoSpeechDetectedError,
    PlaybackDeviceError,
    TranscriptionError,
)
from speakika.core.models import TranscriptionResult
from speakika.services.audio.playable import Playable, PlayableRegistry
from speakika.services.audio.player import BasePlayer, TrackingPlayer
from speakika.services.audio.processor import AudioProcessor, DecodedAudio
from speakika.services.audio.recorder import BaseMicrophone, RecordingSession
from speakika.services.audio.waveform import WaveformEnvelope, compute_envelope
from speakika.services.transcription.base import BaseTranscriber

logger = logging.getLogger(__name__)

STATUS_LOADING_FILE = "Loading audio file..."
STATUS_FILE_READY = "Audio ready. Preview or transcribe when you're set."
STATUS_DECODE_FAILED = "Could not decode the audio file."
STATUS_RECORDING = "Recording... click again to stop."
STATUS_PROCESSING_RECORDING = "Processing recorded audio..."
STATUS_RECORDING_READY = "Recording complete. Preview or transcribe when you're set."
STATUS_MIC_FAILED = "Could not access the microphone. Check permissions."
STATUS_NO_AUDIO_TO_PLAY = "Load audio before playing a preview."
STATUS_PLAYING = "Playing preview..."
STATUS_PAUSED = "Playback paused."
STATUS_FINISHED = "Playback finished."
STATUS_PLAYBACK_FAILED = "Unable to start playback. Check your audio device."
STATUS_NO_AUDIO_TO_TRANSCRIBE = "Upload or record audio before transcribing."
STATUS_TRANSCRIBING = "Transcribing Ika audio..."
STATUS_TRANSCRIBED = "Transcription complete."
STATUS_NO_MOCK_DATA = "No sample transcription available yet. Add mock data to continue."
STATUS_NO_SPEECH = "No speech detected. Try a clearer recording."
STATUS_TRANSCRIBE_FAILED = "Failed to transcribe audio. Please try again later."


class AudioWorkbench:
    """Single-session audio workbench.

    Args:
        transcriber: Speech recognition + translation provider.
        microphone: Capture source; None means recording is unsupported.
        player: Playback device for previews.
        playables: Registry that owns temporary playable references.
    """

    def __init__(
        self,
        transcriber: BaseTranscriber,
        microphone: BaseMicrophone | None = None,
        player: BasePlayer | None = None,
        playables: PlayableRegistry | None = None,
    ) -> None:
        self._transcriber = transcriber
        self._microphone = microphone
        self._player = player or TrackingPlayer()
        self._playables = playables or PlayableRegistry()
        self._decoder: AudioProcessor | None = None
        self._session: RecordingSession | None = None
        # Bumped on every reset so late transcription results can be dropped
        self._generation = 0

        self.playable: Playable | None = None
        self.audio: DecodedAudio | None = None
        self.is_recording = False
        self.is_transcribing = False
        self.is_previewing = False
        self.source_text = ""
        self.target_text = ""
        self.status_message = ""

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def can_preview(self) -> bool:
        return self.playable is not None

    @property
    def can_transcribe(self) -> bool:
        return self.audio is not None and not self.is_transcribing

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def _get_decoder(self) -> AudioProcessor:
        if self._decoder is None:
            self._decoder = AudioProcessor()
        return self._decoder

    def _reset_playback(self) -> None:
        """Release the current playable and clear everything derived from it."""
        self._player.pause()
        self._player.load(None)
        self._playables.release(self.playable)
        self.playable = None
        self.audio = None
        self.is_previewing = False
        self.source_text = ""
        self.target_text = ""
        self._generation += 1

    def _load_blob(self, data: bytes, mime_type: str) -> bool:
        """Create a playable for ``data`` and decode it; False on decode failure."""
        self.playable = self._playables.create(data, mime_type)
        self._player.load(self.playable)
        try:
            self.audio = self._get_decoder().decode(data)
        except AudioDecodeError as exc:
            logger.warning("Failed to decode audio: %s", exc.detail)
            self._reset_playback()
            self.status_message = STATUS_DECODE_FAILED
            return False
        return True

    async def load_file(self, data: bytes, mime_type: str = "application/octet-stream") -> bool:
        """Load an uploaded audio file.

        Returns:
            True if the file decoded; otherwise the status explains why not.
        """
        self._reset_playback()
        self.status_message = STATUS_LOADING_FILE
        if not self._load_blob(data, mime_type):
            return False
        self.status_message = STATUS_FILE_READY
        return True

    async def start_recording(self) -> None:
        """Open the microphone and start buffering; no-op while recording."""
        if self.is_recording:
            return
        try:
            if self._microphone is None:
                raise MicrophoneAccessError("Audio capture is not supported here")
            stream = await self._microphone.open()
            session = RecordingSession(stream)
            session.start()
        except MicrophoneAccessError as exc:
            logger.warning("Recording failed: %s", exc.detail)
            self.status_message = STATUS_MIC_FAILED
            return
        self._session = session
        self.is_recording = True
        self.status_message = STATUS_RECORDING

    async def stop_recording(self) -> bool:
        """Stop the live recording and load it; no-op (False) when idle."""
        if not self.is_recording or self._session is None:
            return False
        session, self._session = self._session, None
        self.is_recording = False
        self.status_message = STATUS_PROCESSING_RECORDING

        blob = await session.stop()
        self._reset_playback()
        if not self._load_blob(blob, session.mime_type):
            return False
        self.status_message = STATUS_RECORDING_READY
        return True

    async def toggle_recording(self) -> None:
        """Start if idle, stop if recording."""
        if self.is_recording:
            await self.stop_recording()
        else:
            await self.start_recording()

    # ------------------------------------------------------------------
    # Waveform
    # ------------------------------------------------------------------

    def render_waveform(
        self,
        client_width: float,
        client_height: float,
        device_pixel_ratio: float = 1.0,
    ) -> WaveformEnvelope | None:
        """Envelope of the first channel, or None when nothing is loaded."""
        if self.audio is None:
            return None
        return compute_envelope(
            self.audio.get_channel_data(0),
            client_width,
            client_height,
            device_pixel_ratio,
        )

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    async def toggle_preview(self) -> None:
        """Play if paused, pause if playing."""
        if self.playable is None:
            self.status_message = STATUS_NO_AUDIO_TO_PLAY
            return

        if self._player.paused:
            try:
                await self._player.play()
            except PlaybackDeviceError as exc:
                logger.warning("Playback failed: %s", exc.detail)
                self.is_previewing = False
                self.status_message = STATUS_PLAYBACK_FAILED
                return
            self.is_previewing = True
            self.status_message = STATUS_PLAYING
        else:
            self._player.pause()
            self.is_previewing = False
            self.status_message = STATUS_PAUSED

    def on_playback_ended(self) -> None:
        """Called by the player when the clip reaches its end."""
        self._player.pause()
        self.is_previewing = False
        self.status_message = STATUS_FINISHED

    def check_preview_finished(self, elapsed: float) -> bool:
        """End the preview once ``elapsed`` seconds cover the whole clip.

        For players that cannot report their own end (the browser's
        ``st.audio``), the caller polls with the time since playback began.
        Returns True when this call ended the preview.
        """
        if not self.is_previewing or self.audio is None:
            return False
        if elapsed < self.audio.duration:
            return False
        self.on_playback_ended()
        return True

    # ------------------------------------------------------------------
    # Transcription
    # ------------------------------------------------------------------

    async def transcribe(self) -> TranscriptionResult | None:
        """Transcribe and translate the loaded audio.

        Returns:
            The result, or None if nothing was loaded, the call failed, or
            the audio was replaced while the call was pending.
        """
        if self.audio is None:
            self.status_message = STATUS_NO_AUDIO_TO_TRANSCRIBE
            return None
        if self.is_transcribing:
            return None

        generation = self._generation
        audio = self.audio
        self.is_transcribing = True
        self.status_message = STATUS_TRANSCRIBING
        try:
            result = await self._transcriber.transcribe(audio.to_mono(), audio.sample_rate)
        except MockDataUnavailableError:
            self.status_message = STATUS_NO_MOCK_DATA
            return None
        except NoSpeechDetectedError:
            self.status_message = STATUS_NO_SPEECH
            return None
        except TranscriptionError as exc:
            logger.warning("Error transcribing audio: %s", exc.detail)
            self.status_message = STATUS_TRANSCRIBE_FAILED
            return None
        finally:
            self.is_transcribing = False

        if generation != self._generation:
            logger.info("Discarding transcription for replaced audio")
            return None

        self.source_text = result.source_text
        self.target_text = result.target_text
        self.status_message = STATUS_TRANSCRIBED
        return result

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Stop any live recording, release the playable, drop the decoder."""
        if self._session is not None:
            session, self._session = self._session, None
            await session.stop()
        self.is_recording = False
        self._reset_playback()
        self._decoder = None
