"""Session description validation.

Accepts incoming descriptions by parsing their body. Whether the
description type is legal for the current signaling state is decided
separately by the signaling state machine.
"""

from dataclasses import dataclass, field

from rtcsignal.description import SessionDescription
from rtcsignal.errors import InvalidSessionDescriptionError
from rtcsignal.protocols import DescriptionSide, SessionCodecProtocol
from rtcsignal.sdp import SdpSession


@dataclass
class AcceptResult:
    """Result of accepting a description."""

    is_valid: bool
    session: SdpSession | None = None
    errors: list[str] = field(default_factory=list)


def accept_description(
    codec: SessionCodecProtocol,
    side: DescriptionSide,
    description: SessionDescription,
    previous: SdpSession | None,
) -> AcceptResult:
    """Parse a description body against the previous session for its side.

    Args:
        codec: Parse service.
        side: Whether the description is being set as local or remote.
        description: The incoming description.
        previous: Session currently accepted for that side, if any.

    Returns:
        AcceptResult with the parsed session on success.
    """
    session = codec.parse(description.sdp, previous)
    if session is None:
        return AcceptResult(
            is_valid=False,
            errors=[
                f"{side.value.capitalize()} {description.type.value} "
                "body could not be parsed"
            ],
        )
    return AcceptResult(is_valid=True, session=session)


def require_valid(result: AcceptResult) -> SdpSession:
    """Return the accepted session, raise if validation failed.

    Raises:
        InvalidSessionDescriptionError: If the body was rejected.
    """
    if not result.is_valid or result.session is None:
        raise InvalidSessionDescriptionError(", ".join(result.errors))
    return result.session
