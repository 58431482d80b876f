"""Signaling state machine.

Tracks the offer/answer progress of one connection and decides which
description types are legal in each state.
"""

import logging

from rtcsignal.errors import IncompatibleSessionDescriptionError, InvalidStateError
from rtcsignal.protocols import DescriptionSide, DescriptionType, SignalingState

logger = logging.getLogger(__name__)

S = SignalingState
T = DescriptionType

LOCAL_TRANSITIONS: dict[tuple[SignalingState, DescriptionType], SignalingState] = {
    (S.STABLE, T.OFFER): S.HAVE_LOCAL_OFFER,
    (S.HAVE_LOCAL_OFFER, T.OFFER): S.HAVE_LOCAL_OFFER,
    (S.HAVE_REMOTE_OFFER, T.ANSWER): S.STABLE,
    (S.HAVE_REMOTE_OFFER, T.PRANSWER): S.HAVE_LOCAL_PRANSWER,
    (S.HAVE_LOCAL_PRANSWER, T.ANSWER): S.STABLE,
    (S.HAVE_LOCAL_PRANSWER, T.PRANSWER): S.HAVE_LOCAL_PRANSWER,
}

REMOTE_TRANSITIONS: dict[tuple[SignalingState, DescriptionType], SignalingState] = {
    (S.STABLE, T.OFFER): S.HAVE_REMOTE_OFFER,
    (S.HAVE_REMOTE_OFFER, T.OFFER): S.HAVE_REMOTE_OFFER,
    (S.HAVE_LOCAL_OFFER, T.ANSWER): S.STABLE,
    (S.HAVE_LOCAL_OFFER, T.PRANSWER): S.HAVE_REMOTE_PRANSWER,
    (S.HAVE_REMOTE_PRANSWER, T.ANSWER): S.STABLE,
    (S.HAVE_REMOTE_PRANSWER, T.PRANSWER): S.HAVE_REMOTE_PRANSWER,
}

TRANSITIONS = {
    DescriptionSide.LOCAL: LOCAL_TRANSITIONS,
    DescriptionSide.REMOTE: REMOTE_TRANSITIONS,
}


class SignalingStateMachine:
    """Owns the signaling state of one connection.

    next_*() only look the transition up; apply_*() also commit it. Pairs
    missing from the tables are illegal and leave the state untouched.
    """

    def __init__(self, state: SignalingState = SignalingState.STABLE):
        self._state = state

    @property
    def state(self) -> SignalingState:
        """Current signaling state."""
        return self._state

    @property
    def is_closed(self) -> bool:
        return self._state == SignalingState.CLOSED

    @property
    def is_stable(self) -> bool:
        return self._state == SignalingState.STABLE

    def assert_not_closed(self) -> None:
        """Raise if the connection is closed.

        Raises:
            InvalidStateError: If the state is closed.
        """
        if self.is_closed:
            logger.warning("Operation attempted on a closed connection")
            raise InvalidStateError("RTCPeerConnection is closed")

    def next_state(
        self, side: DescriptionSide, description_type: DescriptionType
    ) -> SignalingState:
        """Look up the state a description would lead to.

        Raises:
            InvalidStateError: If the connection is closed.
            IncompatibleSessionDescriptionError: If the pair is not in the table.
        """
        self.assert_not_closed()
        description_type = DescriptionType(description_type)
        next_state = TRANSITIONS[side].get((self._state, description_type))
        if next_state is None:
            error = IncompatibleSessionDescriptionError(
                f"Cannot set {side.value} {description_type.value} "
                f'in signaling state "{self._state.value}"'
            )
            logger.warning(f"Rejected {side.value} description: {error}")
            raise error
        return next_state

    def next_local(self, description_type: DescriptionType) -> SignalingState:
        return self.next_state(DescriptionSide.LOCAL, description_type)

    def next_remote(self, description_type: DescriptionType) -> SignalingState:
        return self.next_state(DescriptionSide.REMOTE, description_type)

    def apply(
        self, side: DescriptionSide, description_type: DescriptionType
    ) -> SignalingState:
        """Transition on a description and return the new state."""
        next_state = self.next_state(side, description_type)
        self.commit(next_state)
        return next_state

    def apply_local(self, description_type: DescriptionType) -> SignalingState:
        return self.apply(DescriptionSide.LOCAL, description_type)

    def apply_remote(self, description_type: DescriptionType) -> SignalingState:
        return self.apply(DescriptionSide.REMOTE, description_type)

    def commit(self, next_state: SignalingState) -> None:
        """Store a state previously returned by next_state()."""
        if next_state != self._state:
            logger.info(f"Signaling state: {self._state.value} -> {next_state.value}")
        self._state = next_state

    def close(self) -> None:
        """Force the closed state.

        Raises:
            InvalidStateError: If already closed.
        """
        self.assert_not_closed()
        logger.info(f"Signaling state: {self._state.value} -> closed")
        self._state = SignalingState.CLOSED
