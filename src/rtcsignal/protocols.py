"""Protocols and enums for rtcsignal."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Protocol

if TYPE_CHECKING:
    from rtcsignal.description import SessionDescription
    from rtcsignal.sdp import SdpSession
    from rtcsignal.sdp_validator import AcceptResult


class SignalingState(str, Enum):
    """Negotiation progress of a peer connection."""

    STABLE = "stable"
    HAVE_LOCAL_OFFER = "have-local-offer"
    HAVE_REMOTE_OFFER = "have-remote-offer"
    HAVE_LOCAL_PRANSWER = "have-local-pranswer"
    HAVE_REMOTE_PRANSWER = "have-remote-pranswer"
    CLOSED = "closed"


class DescriptionType(str, Enum):
    """Type of a session description."""

    OFFER = "offer"
    ANSWER = "answer"
    PRANSWER = "pranswer"


class DescriptionSide(Enum):
    """Which end of the connection a description belongs to."""

    LOCAL = "local"
    REMOTE = "remote"


class IceGatheringState(str, Enum):
    """Candidate gathering progress (simulated, see PeerConnection)."""

    NEW = "new"
    GATHERING = "gathering"
    COMPLETED = "completed"


class IceConnectionState(str, Enum):
    """ICE connectivity state. Only the transport layer may change it."""

    NEW = "new"


# ============================================================================
# Events
# ============================================================================


@dataclass(frozen=True)
class IceCandidateEvent:
    """Payload of the ``icecandidate`` event.

    ``candidate`` is None for the end-of-candidates marker, which is the
    only candidate this package ever emits.
    """

    candidate: Any = None


@dataclass(frozen=True)
class MediaStreamEvent:
    """Payload of the ``addstream`` and ``removestream`` events."""

    stream: Any


# ============================================================================
# Media Protocols
# ============================================================================


class MediaTrackProtocol(Protocol):
    """A single media track (aiortc's MediaStreamTrack satisfies this)."""

    @property
    def id(self) -> str: ...

    @property
    def kind(self) -> str: ...

    def stop(self) -> None: ...


# ============================================================================
# Negotiation Protocols
# ============================================================================


class SessionCodecProtocol(Protocol):
    """Parse/serialize service for session description bodies."""

    def parse(self, raw: str, previous: SdpSession | None = None) -> SdpSession | None:
        """Parse a body, seeded with the previous session for the same side.

        Returns:
            The parsed session, or None if the body is invalid.
        """
        ...

    def serialize(self, session: SdpSession) -> str:
        """Render a session as a description body."""
        ...


class NegotiationStrategyProtocol(Protocol):
    """Builds local sessions and accepts incoming descriptions.

    Injected into PeerConnection so transport-specific negotiation can be
    swapped without touching the signaling state machine.
    """

    def build_local_session(self, streams: Iterable[Any]) -> SdpSession:
        """Build a session advertising the given local streams."""
        ...

    def serialize(self, session: SdpSession) -> str:
        """Render a built session as a description body."""
        ...

    def accept(
        self,
        side: DescriptionSide,
        description: SessionDescription,
        previous: SdpSession | None,
    ) -> AcceptResult:
        """Validate a description against the previous session for its side."""
        ...
