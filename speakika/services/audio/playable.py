"""Temporary playable references for loaded audio.

Each ``Playable`` is a temp file holding the encoded clip, addressable by
a ``file://`` URL. The ``PlayableRegistry`` tracks live references so a
session can prove none leak across repeated loads. Files still live when
the registry is garbage collected are unlinked by a finalizer.
"""

import logging
import mimetypes
import tempfile
import weakref
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Browsers report these; mimetypes does not know all of them on every platform
_EXTENSIONS = {
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/wave": ".wav",
    "audio/webm": ".webm",
    "audio/ogg": ".ogg",
    "audio/mpeg": ".mp3",
    "audio/mp4": ".m4a",
}


def _suffix_for(mime_type: str) -> str:
    base = mime_type.split(";")[0].strip().lower()
    return _EXTENSIONS.get(base) or mimetypes.guess_extension(base) or ".bin"


def _unlink_all(live: "dict[Path, Playable]") -> None:
    for path in list(live):
        path.unlink(missing_ok=True)
    if live:
        logger.debug("Unlinked %d playable file(s) on collection", len(live))
    live.clear()


@dataclass(frozen=True)
class Playable:
    """A playable copy of an encoded clip."""

    path: Path
    mime_type: str
    size: int

    @property
    def url(self) -> str:
        return self.path.as_uri()

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


class PlayableRegistry:
    """Creates and releases playable references.

    Args:
        directory: Where temp files are written; system temp dir if empty.
    """

    def __init__(self, directory: str | Path | None = None) -> None:
        self._directory = Path(directory) if directory else None
        self._live: dict[Path, Playable] = {}
        self._finalizer = weakref.finalize(self, _unlink_all, self._live)

    @property
    def live_count(self) -> int:
        """Number of references created and not yet released."""
        return len(self._live)

    def create(self, data: bytes, mime_type: str = "application/octet-stream") -> Playable:
        """Write ``data`` to a new temp file and register it."""
        if self._directory is not None:
            self._directory.mkdir(parents=True, exist_ok=True)
        suffix = _suffix_for(mime_type)
        with tempfile.NamedTemporaryFile(
            prefix="speakika-", suffix=suffix, dir=self._directory, delete=False
        ) as fh:
            fh.write(data)
        playable = Playable(path=Path(fh.name), mime_type=mime_type, size=len(data))
        self._live[playable.path] = playable
        return playable

    def release(self, playable: Playable | None) -> None:
        """Delete the temp file behind ``playable``; unknown or None is a no-op."""
        if playable is None or self._live.pop(playable.path, None) is None:
            return
        playable.path.unlink(missing_ok=True)

    def release_all(self) -> None:
        for playable in list(self._live.values()):
            self.release(playable)
