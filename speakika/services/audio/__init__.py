"""
Audio module - Decoding, capture, playback references, and waveform rendering.
"""

from .playable import Playable, PlayableRegistry
from .player import BasePlayer, TrackingPlayer
from .processor import AudioProcessor, DecodedAudio
from .recorder import BaseMicrophone, MicrophoneStream, RecordingSession
from .waveform import WaveformEnvelope, compute_envelope

__all__ = [
    "AudioProcessor",
    "BaseMicrophone",
    "BasePlayer",
    "DecodedAudio",
    "MicrophoneStream",
    "Playable",
    "PlayableRegistry",
    "RecordingSession",
    "TrackingPlayer",
    "WaveformEnvelope",
    "compute_envelope",
]
