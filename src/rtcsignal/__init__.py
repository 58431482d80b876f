"""Offer/answer signaling state machine for peer-to-peer negotiation."""

from rtcsignal.description import SessionDescription
from rtcsignal.errors import (
    ErrorKind,
    IncompatibleSessionDescriptionError,
    InvalidSessionDescriptionError,
    InvalidStateError,
    SignalingError,
    UnimplementedError,
)
from rtcsignal.peer import PeerConnection
from rtcsignal.protocols import DescriptionType, SignalingState
from rtcsignal.streams import MediaStream

__version__ = "0.1.0"

__all__ = [
    "DescriptionType",
    "ErrorKind",
    "IncompatibleSessionDescriptionError",
    "InvalidSessionDescriptionError",
    "InvalidStateError",
    "MediaStream",
    "PeerConnection",
    "SessionDescription",
    "SignalingError",
    "SignalingState",
    "UnimplementedError",
]
