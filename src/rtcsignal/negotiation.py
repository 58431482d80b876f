"""Default negotiation strategy: SDP builder plus SDP validator."""

from typing import Any, Iterable

from rtcsignal.builder import SessionBuilder
from rtcsignal.description import SessionDescription
from rtcsignal.protocols import DescriptionSide, SessionCodecProtocol
from rtcsignal.sdp import SdpCodec, SdpSession
from rtcsignal.sdp_validator import AcceptResult, accept_description


class SdpNegotiationStrategy:
    """Negotiates with plain SDP bodies and no content negotiation.

    Incoming sessions replace the previous one for their side wholesale.
    """

    def __init__(
        self,
        builder: SessionBuilder,
        codec: SessionCodecProtocol | None = None,
    ):
        self.builder = builder
        self.codec = codec or SdpCodec()

    def build_local_session(self, streams: Iterable[Any]) -> SdpSession:
        return self.builder.build_local_session(streams)

    def serialize(self, session: SdpSession) -> str:
        return self.codec.serialize(session)

    def accept(
        self,
        side: DescriptionSide,
        description: SessionDescription,
        previous: SdpSession | None,
    ) -> AcceptResult:
        return accept_description(self.codec, side, description, previous)
