import ipaddress
import struct

import pytest

from bsdcompat.icmp import (
    ICMP_ADVLENMIN,
    ICMP_TSLEN,
    IcmpHeader,
    IcmpType,
    internet_checksum,
    is_info_type,
)


@pytest.mark.parametrize(
    "number, kind",
    [(8, IcmpType.ECHO), (0, IcmpType.ECHOREPLY), (3, IcmpType.UNREACH)],
)
def test_unpacked_type_numbers(number, kind):
    header = IcmpHeader.unpack(bytes([number]) + bytes(7))
    assert header.type is kind


def test_timestamp_message_has_tslen_bytes():
    raw = bytes([13, 0, 0, 0, 0, 0, 0, 0]) + struct.pack("!III", 1, 2, 3)
    header = IcmpHeader.unpack(raw)
    assert len(header.pack()) == ICMP_TSLEN
    assert header.transmit_time == 3


def test_unpack_echo_fields():
    raw = b"\x08\x00\x12\x34\x00\x01\x00\x02" + b"hello"
    header = IcmpHeader.unpack(raw)
    assert header.type is IcmpType.ECHO
    assert header.code == 0
    assert header.checksum == 0x1234
    assert header.identifier == 1
    assert header.sequence == 2
    assert header.data == b"hello"


def test_pack_round_trip():
    raw = b"\x05\x01\xab\xcd\x0a\x00\x00\x01payload"
    assert IcmpHeader.unpack(raw).pack() == raw


def test_gateway_of_redirect():
    header = IcmpHeader.unpack(b"\x05\x01\x00\x00\x0a\x00\x00\x01")
    assert header.gateway == ipaddress.IPv4Address("10.0.0.1")


def test_short_message_rejected():
    with pytest.raises(ValueError):
        IcmpHeader.unpack(b"\x08\x00\x00")


def test_bad_rest_length_rejected():
    with pytest.raises(ValueError):
        IcmpHeader(IcmpType.ECHO, 0, 0, b"\x00\x00")


def test_unknown_type_kept_as_number():
    header = IcmpHeader.unpack(bytes([99, 0, 0, 0, 0, 0, 0, 0]))
    assert header.type == 99
    assert not is_info_type(header.type)


@pytest.mark.parametrize("kind", [IcmpType.ECHO, IcmpType.TSTAMPREPLY, IcmpType.MASKREQ])
def test_info_types(kind):
    assert is_info_type(kind)


@pytest.mark.parametrize("kind", [IcmpType.UNREACH, IcmpType.REDIRECT, IcmpType.TIMXCEED])
def test_error_types_are_not_info(kind):
    assert not is_info_type(kind)


def test_echo_checksum_verifies():
    message = IcmpHeader.echo(7, 9, b"abc")
    assert internet_checksum(message.pack()) == 0
    parsed = IcmpHeader.unpack(message.pack())
    assert (parsed.identifier, parsed.sequence) == (7, 9)


def test_echo_reply_type():
    assert IcmpHeader.echo(1, 1, reply=True).type is IcmpType.ECHOREPLY


def test_timestamps_from_data():
    data = struct.pack("!III", 11, 22, 33)
    header = IcmpHeader(IcmpType.TSTAMP, 0, 0, bytes(4), data)
    assert (header.originate_time, header.receive_time, header.transmit_time) == (11, 22, 33)


def test_timestamp_missing_raises():
    with pytest.raises(ValueError):
        IcmpHeader(IcmpType.TSTAMP).transmit_time


def test_adv_length_of_minimal_ip_header():
    header = IcmpHeader(IcmpType.UNREACH, 0, 0, bytes(4), bytes([0x45]) + bytes(27))
    assert header.adv_length == ICMP_ADVLENMIN