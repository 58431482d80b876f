"""Peer connection: offer/answer signaling over local and remote streams."""

import logging
import secrets
from typing import Any

from pyee.base import EventEmitter

from rtcsignal.builder import SessionBuilder
from rtcsignal.config import Config
from rtcsignal.description import SessionDescription
from rtcsignal.errors import UnimplementedError
from rtcsignal.negotiation import SdpNegotiationStrategy
from rtcsignal.protocols import (
    DescriptionSide,
    DescriptionType,
    IceCandidateEvent,
    IceConnectionState,
    IceGatheringState,
    NegotiationStrategyProtocol,
    SignalingState,
)
from rtcsignal.sdp import SdpSession
from rtcsignal.sdp_validator import require_valid
from rtcsignal.signaling import SignalingStateMachine
from rtcsignal.streams import StreamSetManager

logger = logging.getLogger(__name__)


class PeerConnection(EventEmitter):
    """Offer/answer negotiation object modeled on RTCPeerConnection.

    Nothing is sent over the network: descriptions are handed back to the
    caller, who transmits them. Remote streams are announced by the
    transport layer through add_remote_stream()/remove_remote_stream().

    Events (handlers run synchronously, in registration order):
        negotiationneeded: a local stream was added/removed while stable.
        signalingstatechange: signaling_state changed.
        icegatheringstatechange: ice_gathering_state changed.
        icecandidate: IceCandidateEvent, once per local description.
        addstream / removestream: MediaStreamEvent, only while stable.
        iceconnectionstatechange: reserved for the transport layer.

    The async operations never suspend; they complete before returning.
    """

    def __init__(
        self,
        configuration: Config | None = None,
        strategy: NegotiationStrategyProtocol | None = None,
    ):
        """Initialize peer connection.

        Args:
            configuration: Signaling settings. Defaults to Config().
            strategy: Negotiation strategy (for testing or custom transports).
        """
        super().__init__()
        self._configuration = configuration or Config()
        # o= session id: positive decimal within signed 64-bit range
        self.id = str(secrets.randbits(62))
        self._strategy = strategy or self._default_strategy()

        self._signaling = SignalingStateMachine()
        self._streams = StreamSetManager(self._signaling, self.emit)

        self._local_description: SessionDescription | None = None
        self._remote_description: SessionDescription | None = None
        self._local_session: SdpSession | None = None
        self._remote_session: SdpSession | None = None

        self._ice_gathering_state = IceGatheringState.NEW
        self._ice_connection_state = IceConnectionState.NEW

    def _default_strategy(self) -> NegotiationStrategyProtocol:
        """Create the default SDP strategy from configuration."""
        signaling = self._configuration.signaling
        builder = SessionBuilder(
            session_id=self.id,
            username=signaling.username,
            address=signaling.address,
        )
        return SdpNegotiationStrategy(builder)

    @property
    def configuration(self) -> Config:
        return self._configuration

    @property
    def signaling_state(self) -> SignalingState:
        """Current signaling state.

        When the state changes, the "signalingstatechange" event is fired.
        """
        return self._signaling.state

    @property
    def ice_gathering_state(self) -> IceGatheringState:
        return self._ice_gathering_state

    @property
    def ice_connection_state(self) -> IceConnectionState:
        return self._ice_connection_state

    @property
    def local_description(self) -> SessionDescription | None:
        return self._local_description

    @property
    def remote_description(self) -> SessionDescription | None:
        return self._remote_description

    @property
    def local_session(self) -> SdpSession | None:
        """Structured form of the accepted local description."""
        return self._local_session

    @property
    def remote_session(self) -> SdpSession | None:
        """Structured form of the accepted remote description."""
        return self._remote_session

    # ------------------------------------------------------------------
    # Offer / answer
    # ------------------------------------------------------------------

    def _create_description(self, description_type: DescriptionType) -> SessionDescription:
        self._signaling.assert_not_closed()
        session = self._strategy.build_local_session(self._streams.local)
        description = SessionDescription(
            type=description_type, sdp=self._strategy.serialize(session)
        )
        logger.debug(
            f"Created {description_type.value} with {len(session.media)} media section(s)"
        )
        return description

    async def create_offer(self) -> SessionDescription:
        """Create an offer advertising every local track.

        Raises:
            InvalidStateError: If the connection is closed.
        """
        return self._create_description(DescriptionType.OFFER)

    async def create_answer(self) -> SessionDescription:
        """Create an answer advertising every local track.

        Raises:
            InvalidStateError: If the connection is closed.
        """
        return self._create_description(DescriptionType.ANSWER)

    async def set_local_description(self, description: SessionDescription) -> None:
        """Apply a local description.

        Raises:
            InvalidStateError: If the connection is closed.
            InvalidSessionDescriptionError: If the body cannot be parsed.
            IncompatibleSessionDescriptionError: If the type is illegal
                in the current signaling state.
        """
        self._set_description(DescriptionSide.LOCAL, description)
        if not self._signaling.is_closed:
            self._complete_ice_gathering()

    async def set_remote_description(self, description: SessionDescription) -> None:
        """Apply a remote description.

        Raises:
            InvalidStateError: If the connection is closed.
            InvalidSessionDescriptionError: If the body cannot be parsed.
            IncompatibleSessionDescriptionError: If the type is illegal
                in the current signaling state.
        """
        self._set_description(DescriptionSide.REMOTE, description)

    def _set_description(
        self, side: DescriptionSide, description: SessionDescription
    ) -> None:
        # Validate and look up the transition before touching any field.
        self._signaling.assert_not_closed()
        previous = (
            self._local_session if side == DescriptionSide.LOCAL else self._remote_session
        )

        result = self._strategy.accept(side, description, previous)
        if not result.is_valid:
            logger.warning(f"Rejected {side.value} description: {', '.join(result.errors)}")
        session = require_valid(result)

        next_state = self._signaling.next_state(side, description.type)

        if side == DescriptionSide.LOCAL:
            self._local_description = description
            self._local_session = session
        else:
            self._remote_description = description
            self._remote_session = session

        self._signaling.commit(next_state)
        self.emit("signalingstatechange")

    def _complete_ice_gathering(self) -> None:
        # No candidates are gathered: the pass completes immediately.
        if self._ice_gathering_state == IceGatheringState.NEW:
            self._set_ice_gathering_state(IceGatheringState.GATHERING)
        self._set_ice_gathering_state(IceGatheringState.COMPLETED)
        self.emit("icecandidate", IceCandidateEvent(candidate=None))

    def _set_ice_gathering_state(self, state: IceGatheringState) -> None:
        if state == self._ice_gathering_state:
            return
        self._ice_gathering_state = state
        self.emit("icegatheringstatechange")

    # ------------------------------------------------------------------
    # ICE
    # ------------------------------------------------------------------

    async def add_ice_candidate(self, candidate: Any) -> None:
        """Always fails: candidate exchange belongs to the transport layer.

        Raises:
            UnimplementedError: Always.
        """
        error = UnimplementedError("add_ice_candidate not implemented")
        logger.warning(f"Rejected ICE candidate: {error}")
        raise error

    def update_ice(self, configuration: Any = None) -> None:
        """Accept new ICE settings. ICE is not run here, so they are ignored."""
        logger.debug("update_ice() ignored, ICE is handled by the transport layer")

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    def get_local_streams(self) -> list[Any]:
        return list(self._streams.local)

    def get_remote_streams(self) -> list[Any]:
        return list(self._streams.remote)

    def get_stream_by_id(self, stream_id: str) -> Any | None:
        """Find a stream by id. Local streams take precedence."""
        return self._streams.lookup(stream_id)

    def add_stream(self, stream: Any) -> None:
        """Attach a local stream (or bare track).

        Raises:
            InvalidStateError: If the connection is closed.
        """
        self._streams.add_local(stream)

    def remove_stream(self, stream: Any) -> None:
        """Detach a local stream.

        Raises:
            InvalidStateError: If the connection is closed.
        """
        self._streams.remove_local(stream)

    def add_remote_stream(self, stream: Any) -> None:
        """Transport entry point: a remote stream became available.

        Raises:
            InvalidStateError: If the connection is closed.
        """
        self._streams.ingest_remote(stream)

    def remove_remote_stream(self, stream: Any) -> None:
        """Transport entry point: a remote stream went away.

        Raises:
            InvalidStateError: If the connection is closed.
        """
        self._streams.evict_remote(stream)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Stop every stream and enter the closed state.

        Unlike most close() methods this is not idempotent.

        Raises:
            InvalidStateError: If already closed.
        """
        self._signaling.assert_not_closed()
        self._streams.stop_all()
        self._signaling.close()
        self.emit("signalingstatechange")
        logger.info(f"Peer connection {self.id} closed")

    async def __aenter__(self):
        """Enter async context."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, closing unless already closed."""
        if not self._signaling.is_closed:
            await self.close()
