"""Base exceptions for rtcsignal."""

from enum import Enum


class ErrorKind(Enum):
    """Named failure kinds surfaced by signaling operations."""

    INVALID_STATE = "InvalidState"
    INVALID_SESSION_DESCRIPTION = "InvalidSessionDescription"
    INCOMPATIBLE_SESSION_DESCRIPTION = "IncompatibleSessionDescription"
    NOT_IMPLEMENTED = "NotImplemented"


class SignalingError(Exception):
    """Base exception for all signaling errors.

    Callers branch on ``kind`` rather than on the concrete class.
    """

    kind: ErrorKind


class InvalidStateError(SignalingError):
    """Mutating call on a closed connection."""

    kind = ErrorKind.INVALID_STATE


class InvalidSessionDescriptionError(SignalingError):
    """Description body could not be parsed."""

    kind = ErrorKind.INVALID_SESSION_DESCRIPTION


class IncompatibleSessionDescriptionError(SignalingError):
    """Description type is not legal for the current signaling state."""

    kind = ErrorKind.INCOMPATIBLE_SESSION_DESCRIPTION


class UnimplementedError(SignalingError):
    """Operation is not supported (ICE is handled by the transport layer)."""

    kind = ErrorKind.NOT_IMPLEMENTED
