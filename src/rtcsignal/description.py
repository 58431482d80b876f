"""Session description value object exchanged between peers."""

from dataclasses import dataclass

from rtcsignal.protocols import DescriptionType

__all__ = [
    "SessionDescription",
]


@dataclass
class SessionDescription:
    """One end of a negotiation: a description type plus an opaque body.

    Attributes:
        type: offer, answer or pranswer. Plain strings are coerced.
        sdp: Serialized session body. Never inspected outside the codec.
    """

    type: DescriptionType
    sdp: str

    def __post_init__(self) -> None:
        try:
            self.type = DescriptionType(self.type)
        except ValueError:
            raise ValueError(
                f"'type' must be one of {[t.value for t in DescriptionType]} "
                f"(got {self.type!r})"
            ) from None
        if not isinstance(self.sdp, str):
            raise ValueError(f"'sdp' must be a string (got {type(self.sdp).__name__})")

    def to_dict(self) -> dict:
        """Convert description to dict for JSON serialization."""
        return {"type": self.type.value, "sdp": self.sdp}

    @classmethod
    def from_dict(cls, d: dict) -> "SessionDescription":
        """Create description from dict."""
        return cls(type=d["type"], sdp=d["sdp"])
