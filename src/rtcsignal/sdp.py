"""SDP parse/serialize service.

Implements the small subset of RFC 4566 the negotiation layer needs:
origin, session name, connection, timing, attributes and media sections.
Unknown line types are skipped, malformed ones make the whole body invalid.
"""

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

LINE_PATTERN = re.compile(r"^([a-z])=(.*)$")
MEDIA_PATTERN = re.compile(r"^(\S+) (\d+)(?:/\d+)? (\S+)(?: (.*))?$")


class SdpSyntaxError(ValueError):
    """Body is not well-formed SDP."""

    pass


@dataclass
class SdpAttribute:
    """Attribute line (a=)."""

    name: str
    value: str | None = None

    def __str__(self) -> str:
        if self.value is not None:
            return f"a={self.name}:{self.value}"
        return f"a={self.name}"

    @classmethod
    def parse(cls, text: str) -> "SdpAttribute":
        name, sep, value = text.partition(":")
        return cls(name, value if sep else None)


@dataclass
class SdpOrigin:
    """Origin line (o=)."""

    username: str = "-"
    session_id: str = "0"
    session_version: int = 0
    net_type: str = "IN"
    addr_type: str = "IP4"
    address: str = "127.0.0.1"

    def __str__(self) -> str:
        return (
            f"o={self.username} {self.session_id} {self.session_version} "
            f"{self.net_type} {self.addr_type} {self.address}"
        )


@dataclass
class SdpMedia:
    """Media section (m= plus its c= and a= lines)."""

    kind: str
    port: int = 9
    protocol: str = "UDP/TLS/RTP/SAVPF"
    formats: list[str] = field(default_factory=list)
    connection_address: str | None = None
    attributes: list[SdpAttribute] = field(default_factory=list)

    def add_attribute(self, name: str, value: str | None = None) -> None:
        self.attributes.append(SdpAttribute(name, value))

    def get_attribute(self, name: str) -> str | None:
        """Return the value of the first attribute with this name."""
        for attr in self.attributes:
            if attr.name == name:
                return attr.value
        return None

    @property
    def mid(self) -> str | None:
        return self.get_attribute("mid")

    def lines(self) -> list[str]:
        formats = " ".join(self.formats) if self.formats else "0"
        lines = [f"m={self.kind} {self.port} {self.protocol} {formats}"]
        if self.connection_address:
            lines.append(f"c=IN IP4 {self.connection_address}")
        lines.extend(str(attr) for attr in self.attributes)
        return lines


@dataclass
class SdpSession:
    """Structured session description, one per side of a connection."""

    origin: SdpOrigin = field(default_factory=SdpOrigin)
    version: int = 0
    name: str = "-"
    connection_address: str | None = None
    timing: str = "0 0"
    attributes: list[SdpAttribute] = field(default_factory=list)
    media: list[SdpMedia] = field(default_factory=list)

    def lines(self) -> list[str]:
        lines = [f"v={self.version}", str(self.origin), f"s={self.name}"]
        if self.connection_address:
            lines.append(f"c=IN IP4 {self.connection_address}")
        lines.append(f"t={self.timing}")
        lines.extend(str(attr) for attr in self.attributes)
        for media in self.media:
            lines.extend(media.lines())
        return lines


def _parse_origin(value: str) -> SdpOrigin:
    # o=<username> <sess-id> <sess-version> <nettype> <addrtype> <address>
    parts = value.split()
    if len(parts) != 6:
        raise SdpSyntaxError(f"origin needs 6 fields, got {len(parts)}")
    if not parts[2].isdigit():
        raise SdpSyntaxError(f"session version is not a number: {parts[2]!r}")
    return SdpOrigin(
        username=parts[0],
        session_id=parts[1],
        session_version=int(parts[2]),
        net_type=parts[3],
        addr_type=parts[4],
        address=parts[5],
    )


def _parse_connection(value: str) -> str:
    # c=<nettype> <addrtype> <connection-address>[/<ttl>]
    parts = value.split()
    if len(parts) != 3:
        raise SdpSyntaxError(f"malformed connection line: {value!r}")
    return parts[2].split("/")[0]


def _parse_media(value: str) -> SdpMedia:
    match = MEDIA_PATTERN.match(value)
    if not match:
        raise SdpSyntaxError(f"malformed media line: {value!r}")
    port = int(match.group(2))
    if port > 65535:
        raise SdpSyntaxError(f"media port out of range: {port}")
    formats = match.group(4).split() if match.group(4) else []
    return SdpMedia(
        kind=match.group(1),
        port=port,
        protocol=match.group(3),
        formats=formats,
    )


def parse_session(raw: str) -> SdpSession:
    """Parse an SDP body.

    Raises:
        SdpSyntaxError: If the body is not well-formed.
    """
    lines = [line.rstrip("\r") for line in raw.split("\n")]
    lines = [line for line in lines if line.strip()]
    if not lines:
        raise SdpSyntaxError("empty body")
    if lines[0] != "v=0":
        raise SdpSyntaxError(f"body must start with v=0, got {lines[0]!r}")

    session = SdpSession()
    seen: set[str] = set()
    current: SdpMedia | None = None

    for line in lines[1:]:
        match = LINE_PATTERN.match(line)
        if not match:
            raise SdpSyntaxError(f"malformed line: {line!r}")
        line_type, value = match.groups()
        if current is None:
            seen.add(line_type)

        if line_type == "m":
            current = _parse_media(value)
            session.media.append(current)
        elif current is not None:
            if line_type == "c":
                current.connection_address = _parse_connection(value)
            elif line_type == "a":
                current.attributes.append(SdpAttribute.parse(value))
        elif line_type == "o":
            session.origin = _parse_origin(value)
        elif line_type == "s":
            session.name = value
        elif line_type == "c":
            session.connection_address = _parse_connection(value)
        elif line_type == "t":
            session.timing = value
        elif line_type == "a":
            session.attributes.append(SdpAttribute.parse(value))

    missing = [t for t in ("o", "s", "t") if t not in seen]
    if missing:
        raise SdpSyntaxError(f"missing required lines: {', '.join(missing)}")

    return session


class SdpCodec:
    """Default parse/serialize service used by the negotiation strategy."""

    def parse(self, raw: str, previous: SdpSession | None = None) -> SdpSession | None:
        """Parse a body, seeded with the previous session for the same side.

        A body that reuses the previous session id must not lower its
        session version.

        Returns:
            Parsed session, or None if the body is invalid.
        """
        if not isinstance(raw, str):
            logger.debug(f"Rejecting SDP body of type {type(raw).__name__}")
            return None
        try:
            session = parse_session(raw)
        except SdpSyntaxError as e:
            logger.debug(f"Rejecting SDP body: {e}")
            return None

        if (
            previous is not None
            and previous.origin.session_id == session.origin.session_id
            and session.origin.session_version < previous.origin.session_version
        ):
            logger.debug(
                f"Rejecting SDP body: session version went from "
                f"{previous.origin.session_version} to {session.origin.session_version}"
            )
            return None

        return session

    def serialize(self, session: SdpSession) -> str:
        """Render a session as a CRLF-terminated SDP body."""
        return "\r\n".join(session.lines()) + "\r\n"
