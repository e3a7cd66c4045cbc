"""
Workbench component: upload or record, then preview, visualize and transcribe.

The browser does the capture (``st.audio_input``) and playback
(``st.audio``); an ``AudioWorkbench`` kept in session state owns the
decoded buffer and status line across reruns.
"""

import asyncio
import logging
import time

import streamlit as st

from speakika.core.config import get_settings
from speakika.core.exceptions import MicrophoneAccessError
from speakika.services.audio.playable import PlayableRegistry
from speakika.services.audio.recorder import BaseMicrophone, ChunkCallback, MicrophoneStream
from speakika.services.transcription import create_transcriber
from speakika.services.workbench import AudioWorkbench

logger = logging.getLogger(__name__)

# Canvas box in CSS pixels; the envelope is computed at 2x for sharp lines
_WAVEFORM_WIDTH = 720
_WAVEFORM_HEIGHT = 224
_DEVICE_PIXEL_RATIO = 2.0
# How often the preview watcher compares elapsed time with the clip length
_PREVIEW_POLL_SECONDS = 0.5


class _CapturedStream(MicrophoneStream):
    """Delivers a clip the browser already captured when stopped."""

    def __init__(self, data: bytes, mime_type: str) -> None:
        self._data = data
        self.mime_type = mime_type
        self._on_data: ChunkCallback | None = None

    def start(self, on_data: ChunkCallback) -> None:
        self._on_data = on_data

    async def stop(self) -> None:
        if self._on_data is not None:
            self._on_data(self._data)
        self._on_data = None


class BrowserMicrophone(BaseMicrophone):
    """Microphone backed by ``st.audio_input`` captures."""

    def __init__(self) -> None:
        self._pending: tuple[bytes, str] | None = None

    def feed(self, data: bytes, mime_type: str = "audio/wav") -> None:
        self._pending = (data, mime_type)

    async def open(self) -> MicrophoneStream:
        if self._pending is None:
            raise MicrophoneAccessError("No capture received from the browser")
        data, mime_type = self._pending
        self._pending = None
        return _CapturedStream(data, mime_type)


def _run(coro):
    return asyncio.run(coro)


def _get_workbench() -> AudioWorkbench:
    if st.session_state.get("workbench") is None:
        settings = get_settings()
        microphone = BrowserMicrophone()
        st.session_state.microphone = microphone
        st.session_state.workbench = AudioWorkbench(
            transcriber=create_transcriber(settings.transcription_provider, settings),
            microphone=microphone,
            playables=PlayableRegistry(settings.playable_dir or None),
        )
    return st.session_state.workbench


async def _record_capture(workbench: AudioWorkbench) -> None:
    await workbench.toggle_recording()
    await workbench.toggle_recording()


def _handle_inputs(workbench: AudioWorkbench) -> None:
    """Feed new uploads and captures into the workbench (once per widget value)."""
    col_upload, col_record = st.columns(2)
    with col_upload:
        upload = st.file_uploader("Upload Audio", type=None, accept_multiple_files=False)
    with col_record:
        capture = st.audio_input("Record Audio")

    if upload is not None and upload.file_id != st.session_state.get("last_upload_id"):
        st.session_state.last_upload_id = upload.file_id
        logger.info("Loading upload %s (%d bytes)", upload.name, upload.size)
        _run(workbench.load_file(upload.getvalue(), upload.type or "application/octet-stream"))

    if capture is not None and capture.file_id != st.session_state.get("last_capture_id"):
        st.session_state.last_capture_id = capture.file_id
        logger.info("Loading browser capture (%d bytes)", capture.size)
        st.session_state.microphone.feed(capture.getvalue(), capture.type or "audio/wav")
        _run(_record_capture(workbench))


def _render_audio(workbench: AudioWorkbench) -> None:
    envelope = workbench.render_waveform(_WAVEFORM_WIDTH, _WAVEFORM_HEIGHT, _DEVICE_PIXEL_RATIO)
    if envelope is not None:
        st.html(
            f'<div style="height:{_WAVEFORM_HEIGHT}px;width:100%">'
            f"{envelope.to_svg()}</div>"
        )

    if workbench.playable is not None:
        st.audio(
            workbench.playable.read_bytes(),
            format=workbench.playable.mime_type,
            autoplay=workbench.is_previewing,
        )
    else:
        st.caption("Load audio to visualize and preview playback.")


@st.fragment(run_every=_PREVIEW_POLL_SECONDS)
def _watch_preview() -> None:
    """Mark the preview finished once the browser player has run past the clip."""
    workbench = st.session_state.get("workbench")
    started = st.session_state.get("preview_started_at")
    if workbench is None or started is None or not workbench.is_previewing:
        return
    if workbench.check_preview_finished(time.monotonic() - started):
        st.session_state.preview_started_at = None
        st.rerun()


def _render_controls(workbench: AudioWorkbench) -> None:
    col_preview, col_transcribe, col_clear = st.columns(3)
    with col_preview:
        label = "Pause Preview" if workbench.is_previewing else "Play Preview"
        if st.button(label, disabled=not workbench.can_preview, use_container_width=True):
            _run(workbench.toggle_preview())
            if workbench.is_previewing:
                st.session_state.preview_started_at = time.monotonic()
            st.rerun()
    with col_transcribe:
        label = "Transcribing..." if workbench.is_transcribing else "Transcribe"
        if st.button(
            label,
            type="primary",
            disabled=not workbench.can_transcribe,
            use_container_width=True,
        ):
            with st.spinner(workbench.status_message or "Transcribing Ika audio..."):
                _run(workbench.transcribe())
            st.rerun()
    with col_clear:
        if st.button("Clear", use_container_width=True):
            _run(workbench.close())
            st.session_state.workbench = None
            st.rerun()

    _watch_preview()

    if workbench.status_message:
        st.caption(workbench.status_message)


def _render_results(workbench: AudioWorkbench) -> None:
    st.subheader("Ika Transcription")
    st.write(workbench.source_text or "Run transcription to populate the Ika text.")
    st.subheader("English Translation")
    st.write(workbench.target_text or "Translation will appear after transcription completes.")
    st.info(
        "This page may use a mocked transcription pipeline. Set "
        "TRANSCRIPTION_PROVIDER to 'http' or 'whisper' to plug in real models."
    )


def render_workbench() -> None:
    """Render the full workbench UI based on current session state."""
    workbench = _get_workbench()
    left, right = st.columns(2)
    with left:
        _handle_inputs(workbench)
        _render_audio(workbench)
        _render_controls(workbench)
    with right:
        _render_results(workbench)
