"""Conversion of IPv4 network numbers from text to network byte order."""

from __future__ import annotations

import errno
import socket
from typing import Tuple

_DIGITS = "0123456789"
_XDIGITS = "0123456789abcdefABCDEF"
_SIZE_MODULUS = 1 << 64


def _not_a_network(src: str) -> OSError:
    return OSError(errno.ENOENT, f"not a valid network specification: {src!r}")


def _too_big(src: str) -> OSError:
    return OSError(errno.EMSGSIZE, f"network number does not fit: {src!r}")


def _store(memory: list, index: int, value: int) -> None:
    if index >= len(memory):
        memory.extend([0] * (index + 1 - len(memory)))
    memory[index] = value & 0xFF


def _pton_ipv4(src: str, size: int) -> Tuple[int, bytes]:
    # Text stops at the first NUL; padding gives the scanner room to look ahead.
    text = src.split("\0", 1)[0] + "\0\0\0"
    if size < 0:
        raise ValueError(f"negative size: {size}")

    memory: list = []
    written = 0
    pos = 0
    ch = text[pos]
    pos += 1

    if ch == "0" and text[pos] in "xX" and text[pos + 1] in _XDIGITS:
        # Hexadecimal: eat a string of nibbles.
        if size == 0:
            raise _too_big(src)
        _store(memory, 0, 0)
        dirty = False
        pos += 1
        while True:
            ch = text[pos]
            pos += 1
            if ch == "\0" or ch not in _XDIGITS:
                break
            value = memory[written] | int(ch, 16)
            if not dirty:
                _store(memory, written, value << 4)
                dirty = True
            elif size > 0:
                _store(memory, written, value)
                size -= 1
                written += 1
                _store(memory, written, 0)
                dirty = False
            else:
                raise _too_big(src)
        if dirty:
            size = (size - 1) % _SIZE_MODULUS
    elif ch in _DIGITS:
        # Decimal: eat a dotted string of octets.
        while True:
            octet = 0
            while True:
                octet = octet * 10 + int(ch)
                if octet > 255:
                    raise _not_a_network(src)
                ch = text[pos]
                pos += 1
                if ch not in _DIGITS:
                    break
            if size == 0:
                raise _too_big(src)
            size -= 1
            _store(memory, written, octet)
            written += 1
            if ch in ("\0", "/"):
                break
            if ch != ".":
                raise _not_a_network(src)
            ch = text[pos]
            pos += 1
            if ch not in _DIGITS:
                raise _not_a_network(src)
    else:
        raise _not_a_network(src)

    bits = -1
    if ch == "/" and text[pos] in _DIGITS and written > 0:
        # CIDR width: nothing may follow it.
        ch = text[pos]
        pos += 1
        bits = 0
        while True:
            bits = bits * 10 + int(ch)
            ch = text[pos]
            pos += 1
            if ch not in _DIGITS:
                break
        if ch != "\0":
            raise _not_a_network(src)
        if bits > 32:
            raise _too_big(src)

    if ch != "\0":
        raise _not_a_network(src)
    if written == 0:
        raise _not_a_network(src)

    if bits == -1:
        first = memory[0]
        if first >= 240:
            bits = 32
        elif first >= 224:
            bits = 4
        elif first >= 192:
            bits = 24
        elif first >= 128:
            bits = 16
        else:
            bits = 8
        bits = max(bits, written * 8)

    # Extend the network to cover the whole mask.
    while bits > written * 8:
        if size == 0:
            raise _too_big(src)
        size -= 1
        _store(memory, written, 0)
        written += 1

    return bits, bytes(memory[:written])


def inet_net_pton(family: int, src: str, size: int = 4) -> Tuple[int, bytes]:
    """Parse a network number and return ``(bits, address_bytes)``.

    Accepts hex strings (``0x...``), dotted decimal octets and an optional
    ``/width``.  Without a width the mask is inferred from the address
    class.  ``size`` bounds the number of bytes that may be produced.
    Raises OSError with errno ENOENT for text that is not a network,
    EMSGSIZE when the result does not fit, and EAFNOSUPPORT for a family
    other than AF_INET.
    """
    if family != socket.AF_INET:
        raise OSError(errno.EAFNOSUPPORT, f"address family not supported: {family}")
    return _pton_ipv4(src, size)