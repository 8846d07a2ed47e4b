"""ICMP message header layout, type and code values (RFC 792)."""

from __future__ import annotations

import enum
import ipaddress
import struct
from dataclasses import dataclass

ICMP_MINLEN = 8  # absolute minimum
ICMP_TSLEN = 8 + 3 * 4  # timestamp
ICMP_MASKLEN = 12  # address mask
_IP_HEADER_MINLEN = 20
ICMP_ADVLENMIN = 8 + _IP_HEADER_MINLEN + 8
ICMP_MAXTYPE = 40

ICMP_UNREACH_NET = 0
ICMP_UNREACH_HOST = 1
ICMP_UNREACH_PROTOCOL = 2
ICMP_UNREACH_PORT = 3
ICMP_UNREACH_NEEDFRAG = 4
ICMP_UNREACH_SRCFAIL = 5
ICMP_UNREACH_NET_UNKNOWN = 6
ICMP_UNREACH_HOST_UNKNOWN = 7
ICMP_UNREACH_ISOLATED = 8
ICMP_UNREACH_NET_PROHIB = 9
ICMP_UNREACH_HOST_PROHIB = 10
ICMP_UNREACH_TOSNET = 11
ICMP_UNREACH_TOSHOST = 12
ICMP_UNREACH_FILTER_PROHIB = 13
ICMP_UNREACH_HOST_PRECEDENCE = 14
ICMP_UNREACH_PRECEDENCE_CUTOFF = 15

ICMP_REDIRECT_NET = 0
ICMP_REDIRECT_HOST = 1
ICMP_REDIRECT_TOSNET = 2
ICMP_REDIRECT_TOSHOST = 3

ICMP_ROUTERADVERT_NORMAL = 0
ICMP_ROUTERADVERT_NOROUTE_COMMON = 16

ICMP_TIMXCEED_INTRANS = 0
ICMP_TIMXCEED_REASS = 1

ICMP_PARAMPROB_ERRATPTR = 0
ICMP_PARAMPROB_OPTABSENT = 1
ICMP_PARAMPROB_LENGTH = 2

ICMP_PHOTURIS_UNKNOWN_INDEX = 1
ICMP_PHOTURIS_AUTH_FAILED = 2
ICMP_PHOTURIS_DECRYPT_FAILED = 3


class IcmpType(enum.IntEnum):
    """ICMP message types."""

    ECHOREPLY = 0
    UNREACH = 3
    SOURCEQUENCH = 4
    REDIRECT = 5
    ALTHOSTADDR = 6
    ECHO = 8
    ROUTERADVERT = 9
    ROUTERSOLICIT = 10
    TIMXCEED = 11
    PARAMPROB = 12
    TSTAMP = 13
    TSTAMPREPLY = 14
    IREQ = 15
    IREQREPLY = 16
    MASKREQ = 17
    MASKREPLY = 18
    TRACEROUTE = 30
    DATACONVERR = 31
    MOBILE_REDIRECT = 32
    IPV6_WHEREAREYOU = 33
    IPV6_IAMHERE = 34
    MOBILE_REGREQUEST = 35
    MOBILE_REGREPLY = 36
    SKIP = 39
    PHOTURIS = 40


_INFO_TYPES = frozenset({
    IcmpType.ECHOREPLY, IcmpType.ECHO,
    IcmpType.ROUTERADVERT, IcmpType.ROUTERSOLICIT,
    IcmpType.TSTAMP, IcmpType.TSTAMPREPLY,
    IcmpType.IREQ, IcmpType.IREQREPLY,
    IcmpType.MASKREQ, IcmpType.MASKREPLY,
})

_HEADER = struct.Struct("!BBH4s")
_PAIR = struct.Struct("!HH")
_WORD = struct.Struct("!I")


def is_info_type(icmp_type: int) -> bool:
    """Return True for informational (query and reply) message types."""
    return icmp_type in _INFO_TYPES


def internet_checksum(data: bytes) -> int:
    """Return the ones-complement sum used in the ICMP checksum field."""
    data = bytes(data)
    if len(data) % 2:
        data += b"\0"
    total = sum(struct.unpack(f"!{len(data) // 2}H", data))
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return ~total & 0xFFFF


def _as_type(value: int):
    try:
        return IcmpType(value)
    except ValueError:
        return value


@dataclass
class IcmpHeader:
    """An ICMP message: the fixed 8-byte header and what follows it.

    ``rest`` is the 4-byte field whose meaning depends on the type
    (identifier and sequence, gateway address, pointer, next MTU, ...);
    ``data`` is everything after the fixed header.
    """

    type: int
    code: int = 0
    checksum: int = 0
    rest: bytes = bytes(4)
    data: bytes = b""

    def __post_init__(self) -> None:
        self.rest = bytes(self.rest)
        self.data = bytes(self.data)
        if len(self.rest) != 4:
            raise ValueError(f"rest of header must be 4 bytes, got {len(self.rest)}")
        for name, value, limit in (("type", self.type, 0xFF),
                                   ("code", self.code, 0xFF),
                                   ("checksum", self.checksum, 0xFFFF)):
            if not 0 <= value <= limit:
                raise ValueError(f"{name} out of range: {value}")
        self.type = _as_type(self.type)

    @classmethod
    def unpack(cls, data) -> "IcmpHeader":
        """Parse a message; raise ValueError if shorter than ICMP_MINLEN."""
        data = bytes(data)
        if len(data) < ICMP_MINLEN:
            raise ValueError(f"ICMP message needs {ICMP_MINLEN} bytes, got {len(data)}")
        icmp_type, code, checksum, rest = _HEADER.unpack_from(data)
        return cls(icmp_type, code, checksum, rest, data[ICMP_MINLEN:])

    def pack(self) -> bytes:
        """Return the message in wire format."""
        return _HEADER.pack(self.type, self.code, self.checksum, self.rest) + self.data

    @classmethod
    def echo(cls, identifier: int, sequence: int, data=b"",
             reply: bool = False) -> "IcmpHeader":
        """Build an echo request or reply with a correct checksum."""
        kind = IcmpType.ECHOREPLY if reply else IcmpType.ECHO
        message = cls(kind, 0, 0, _PAIR.pack(identifier, sequence), data)
        return message.with_checksum()

    def with_checksum(self) -> "IcmpHeader":
        """Return a copy whose checksum field is computed over the message."""
        blank = IcmpHeader(self.type, self.code, 0, self.rest, self.data)
        return IcmpHeader(self.type, self.code, internet_checksum(blank.pack()),
                          self.rest, self.data)

    @property
    def identifier(self) -> int:
        return _PAIR.unpack(self.rest)[0]

    @property
    def sequence(self) -> int:
        return _PAIR.unpack(self.rest)[1]

    @property
    def pointer(self) -> int:
        return self.rest[0]

    @property
    def gateway(self) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(self.rest)

    @property
    def next_mtu(self) -> int:
        return _PAIR.unpack(self.rest)[1]

    @property
    def num_addrs(self) -> int:
        return self.rest[0]

    @property
    def addr_entry_words(self) -> int:
        return self.rest[1]

    @property
    def lifetime(self) -> int:
        return _PAIR.unpack(self.rest)[1]

    def _data_word(self, index: int) -> int:
        offset = index * 4
        if len(self.data) < offset + 4:
            raise ValueError("message too short for this field")
        return _WORD.unpack_from(self.data, offset)[0]

    @property
    def originate_time(self) -> int:
        return self._data_word(0)

    @property
    def receive_time(self) -> int:
        return self._data_word(1)

    @property
    def transmit_time(self) -> int:
        return self._data_word(2)

    @property
    def mask(self) -> int:
        return self._data_word(0)

    @property
    def adv_length(self) -> int:
        """Minimum length of an error message given its quoted IP header."""
        if not self.data:
            raise ValueError("no quoted IP header")
        return 8 + ((self.data[0] & 0x0F) << 2) + 8