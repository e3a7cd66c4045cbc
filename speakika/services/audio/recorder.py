"""Microphone capture interfaces and the chunk buffer for one recording.

A ``BaseMicrophone`` hands out ``MicrophoneStream`` objects; the stream
pushes encoded chunks into a ``RecordingSession`` until it is stopped,
after which the session joins them into a single encoded clip.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[bytes], None]


class MicrophoneStream(ABC):
    """A live capture that emits encoded audio chunks."""

    mime_type: str = "audio/webm"

    @abstractmethod
    def start(self, on_data: ChunkCallback) -> None:
        """Begin delivering chunks to ``on_data``."""

    @abstractmethod
    async def stop(self) -> None:
        """Stop capturing; any final chunk is delivered before this returns."""


class BaseMicrophone(ABC):
    """Interface every microphone source must implement."""

    @abstractmethod
    async def open(self) -> MicrophoneStream:
        """Request access to the microphone.

        Raises:
            MicrophoneAccessError: Permission denied or capture unsupported.
        """


class RecordingSession:
    """Accumulates the encoded chunks of one recording.

    Args:
        stream: The microphone stream feeding this session.
    """

    def __init__(self, stream: MicrophoneStream) -> None:
        self._stream = stream
        self._chunks: list[bytes] = []
        self._active = False

    @property
    def mime_type(self) -> str:
        return self._stream.mime_type

    @property
    def active(self) -> bool:
        return self._active

    @property
    def buffered_bytes(self) -> int:
        """Total size of the chunks captured so far."""
        return sum(len(c) for c in self._chunks)

    def start(self) -> None:
        """Reset the buffer and start the stream."""
        self._chunks = []
        self._active = True
        self._stream.start(self.add_chunk)

    def add_chunk(self, data: bytes) -> None:
        """Append one encoded chunk; empty chunks are dropped."""
        if data:
            self._chunks.append(data)

    async def stop(self) -> bytes:
        """Stop the stream and return all chunks joined into one clip."""
        await self._stream.stop()
        self._active = False
        blob = b"".join(self._chunks)
        self._chunks = []
        logger.debug("Recording stopped with %d bytes", len(blob))
        return blob
