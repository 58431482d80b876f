"""Local and remote stream sets of a peer connection."""

import logging
import uuid
from typing import Any, Callable, Iterator

from rtcsignal.protocols import MediaStreamEvent, MediaTrackProtocol
from rtcsignal.signaling import SignalingStateMachine

logger = logging.getLogger(__name__)


class MediaStream:
    """Groups tracks under one stream id.

    Tracks are any objects with ``id``, ``kind`` and ``stop()``, such as
    aiortc's AudioStreamTrack and VideoStreamTrack.
    """

    def __init__(
        self,
        tracks: list[MediaTrackProtocol] | None = None,
        stream_id: str | None = None,
    ):
        self.id = stream_id or str(uuid.uuid4())
        self._tracks: list[MediaTrackProtocol] = list(tracks or [])

    def add_track(self, track: MediaTrackProtocol) -> None:
        if all(t.id != track.id for t in self._tracks):
            self._tracks.append(track)

    def get_tracks(self) -> list[MediaTrackProtocol]:
        return list(self._tracks)

    def get_audio_tracks(self) -> list[MediaTrackProtocol]:
        return [t for t in self._tracks if t.kind == "audio"]

    def get_video_tracks(self) -> list[MediaTrackProtocol]:
        return [t for t in self._tracks if t.kind == "video"]

    def stop(self) -> None:
        """Stop every track of the stream."""
        for track in self._tracks:
            track.stop()

    def __repr__(self) -> str:
        return f"MediaStream(id={self.id!r}, tracks={len(self._tracks)})"


class StreamSet:
    """Insertion-ordered collection of streams keyed by id."""

    def __init__(self) -> None:
        self._streams: dict[str, Any] = {}

    def add(self, stream: Any) -> bool:
        """Add a stream. Returns False if its id is already present."""
        if stream.id in self._streams:
            return False
        self._streams[stream.id] = stream
        return True

    def remove(self, stream: Any) -> bool:
        """Remove a stream by id. Returns False if it was not present."""
        if stream.id not in self._streams:
            return False
        del self._streams[stream.id]
        return True

    def get(self, stream_id: str) -> Any | None:
        return self._streams.get(stream_id)

    def __contains__(self, stream_id: object) -> bool:
        return stream_id in self._streams

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._streams.values()))

    def __len__(self) -> int:
        return len(self._streams)


class StreamSetManager:
    """Maintains the local and remote stream sets.

    Notifications only fire while the signaling state is stable. Every
    mutation fails once the connection is closed.
    """

    def __init__(
        self,
        signaling: SignalingStateMachine,
        emit: Callable[..., Any],
    ):
        """Initialize stream sets.

        Args:
            signaling: State machine consulted for the closed/stable guards.
            emit: Event emitter callback, called as emit(event, *args).
        """
        self._signaling = signaling
        self._emit = emit
        self.local = StreamSet()
        self.remote = StreamSet()

    def lookup(self, stream_id: str) -> Any | None:
        """Find a stream by id, local entries first."""
        stream = self.local.get(stream_id)
        if stream is None:
            stream = self.remote.get(stream_id)
        return stream

    def add_local(self, stream: Any) -> bool:
        """Add a local stream, returns True if it was net-new.

        Raises:
            InvalidStateError: If the connection is closed.
        """
        self._signaling.assert_not_closed()
        if self.lookup(stream.id) is not None:
            logger.debug(f"Stream {stream.id} already attached, ignoring add")
            return False
        self.local.add(stream)
        logger.info(f"Local stream added: {stream.id}")
        self._negotiation_needed()
        return True

    def remove_local(self, stream: Any) -> bool:
        """Remove a local stream, returns True if it was present.

        Raises:
            InvalidStateError: If the connection is closed.
        """
        self._signaling.assert_not_closed()
        if not self.local.remove(stream):
            logger.debug(f"Stream {stream.id} not attached, ignoring remove")
            return False
        logger.info(f"Local stream removed: {stream.id}")
        self._negotiation_needed()
        return True

    def ingest_remote(self, stream: Any) -> bool:
        """Record a stream announced by the transport layer.

        Raises:
            InvalidStateError: If the connection is closed.
        """
        self._signaling.assert_not_closed()
        if self.lookup(stream.id) is not None:
            return False
        self.remote.add(stream)
        logger.info(f"Remote stream added: {stream.id}")
        if self._signaling.is_stable:
            self._emit("addstream", MediaStreamEvent(stream=stream))
        return True

    def evict_remote(self, stream: Any) -> bool:
        """Drop a stream the transport layer reports as gone.

        Raises:
            InvalidStateError: If the connection is closed.
        """
        self._signaling.assert_not_closed()
        if not self.remote.remove(stream):
            return False
        logger.info(f"Remote stream removed: {stream.id}")
        if self._signaling.is_stable:
            self._emit("removestream", MediaStreamEvent(stream=stream))
        return True

    def stop_all(self) -> None:
        """Stop every attached stream, local first."""
        for stream in [*self.local, *self.remote]:
            stream.stop()

    def _negotiation_needed(self) -> None:
        if self._signaling.is_stable:
            self._emit("negotiationneeded")
