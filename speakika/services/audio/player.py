"""Playback device interface used by the workbench preview."""

from abc import ABC, abstractmethod

from speakika.core.exceptions import PlaybackDeviceError
from speakika.services.audio.playable import Playable


class BasePlayer(ABC):
    """An output device that plays one playable reference at a time."""

    @property
    @abstractmethod
    def paused(self) -> bool:
        """True unless playback is running."""

    @abstractmethod
    def load(self, playable: Playable | None) -> None:
        """Point the player at a new source (or none), stopping playback."""

    @abstractmethod
    async def play(self) -> None:
        """Start or resume playback.

        Raises:
            PlaybackDeviceError: The device refused to start.
        """

    @abstractmethod
    def pause(self) -> None:
        """Pause playback."""


class TrackingPlayer(BasePlayer):
    """Player that only tracks state; the actual audio is played elsewhere.

    Used when the front end owns the audio element (e.g. Streamlit's
    ``st.audio`` with autoplay) and the workbench just needs to know
    whether a preview is running.
    """

    def __init__(self) -> None:
        self._source: Playable | None = None
        self._paused = True

    @property
    def source(self) -> Playable | None:
        return self._source

    @property
    def paused(self) -> bool:
        return self._paused

    def load(self, playable: Playable | None) -> None:
        self._source = playable
        self._paused = True

    async def play(self) -> None:
        if self._source is None or not self._source.path.exists():
            raise PlaybackDeviceError("No playable source loaded")
        self._paused = False

    def pause(self) -> None:
        self._paused = True
