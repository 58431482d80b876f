"""Local session builder.

Turns the local stream set into an SdpSession: one media section per
track, wrapped with an origin record.
"""

import logging
from typing import Any, Iterable

from rtcsignal.sdp import SdpMedia, SdpOrigin, SdpSession

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "127.0.0.1"
DEFAULT_USERNAME = "rtcsignal"

# kind -> [(payload type, rtpmap)]
DEFAULT_CODECS: dict[str, list[tuple[int, str]]] = {
    "audio": [(0, "PCMU/8000"), (8, "PCMA/8000")],
    "video": [(96, "VP8/90000")],
}


def flatten_tracks(streams: Iterable[Any]) -> list[tuple[Any, Any]]:
    """Flatten streams into (stream, track) pairs.

    An entry without get_tracks() is treated as a bare track and stands
    for its own stream.
    """
    pairs = []
    for stream in streams:
        get_tracks = getattr(stream, "get_tracks", None)
        if get_tracks is None:
            pairs.append((stream, stream))
            continue
        for track in get_tracks():
            pairs.append((stream, track))
    return pairs


def media_for_track(stream: Any, track: Any, mid: str) -> SdpMedia:
    """Describe one track as a sendrecv media section."""
    kind = getattr(track, "kind", None) or "application"
    media = SdpMedia(kind=kind)
    for payload_type, rtpmap in DEFAULT_CODECS.get(kind, []):
        media.formats.append(str(payload_type))
        media.add_attribute("rtpmap", f"{payload_type} {rtpmap}")
    media.add_attribute("mid", mid)
    media.add_attribute("msid", f"{stream.id} {track.id}")
    media.add_attribute("sendrecv")
    return media


def origin_username(username: str | None) -> str:
    """Return a username usable as the first o= field."""
    if not username or any(char.isspace() for char in username):
        logger.warning(f"Origin username {username!r} is not a single token, using '-'")
        return "-"
    return username


class SessionBuilder:
    """Builds local sessions with a stable session id and bumping version."""

    def __init__(
        self,
        session_id: str,
        username: str = DEFAULT_USERNAME,
        address: str | None = None,
    ):
        """Initialize builder.

        Args:
            session_id: Origin session id, fixed for the builder's lifetime.
            username: Origin username. One that is empty or contains
                whitespace cannot be an o= field and is replaced by "-".
            address: Origin address. Defaults to loopback.
        """
        self.session_id = session_id
        self.username = origin_username(username)
        self.address = address or DEFAULT_ADDRESS
        self._version = 0

    @property
    def version(self) -> int:
        """Session version of the most recent build (0 before any build)."""
        return self._version

    def build_local_session(self, streams: Iterable[Any]) -> SdpSession:
        """Build a session advertising every track of the given streams."""
        self._version += 1
        media = [
            media_for_track(stream, track, str(index))
            for index, (stream, track) in enumerate(flatten_tracks(streams))
        ]
        session = SdpSession(
            origin=SdpOrigin(
                username=self.username,
                session_id=self.session_id,
                session_version=self._version,
                address=self.address,
            ),
            connection_address=self.address,
            media=media,
        )
        logger.debug(
            f"Built local session {self.session_id} v{self._version} "
            f"with {len(media)} media section(s)"
        )
        return session
