"""The MD5 message-digest algorithm as an incremental context."""

from __future__ import annotations

import struct

from bsdcompat.hashbase import HashContext

MD5_BLOCK_LENGTH = 64
MD5_DIGEST_LENGTH = 16
MD5_DIGEST_STRING_LENGTH = MD5_DIGEST_LENGTH * 2 + 1

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF

_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)

_PADDING = b"\x80" + bytes(MD5_BLOCK_LENGTH - 1)

_CONSTANTS = (
    0xD76AA478, 0xE8C7B756, 0x242070DB, 0xC1BDCEEE,
    0xF57C0FAF, 0x4787C62A, 0xA8304613, 0xFD469501,
    0x698098D8, 0x8B44F7AF, 0xFFFF5BB1, 0x895CD7BE,
    0x6B901122, 0xFD987193, 0xA679438E, 0x49B40821,
    0xF61E2562, 0xC040B340, 0x265E5A51, 0xE9B6C7AA,
    0xD62F105D, 0x02441453, 0xD8A1E681, 0xE7D3FBC8,
    0x21E1CDE6, 0xC33707D6, 0xF4D50D87, 0x455A14ED,
    0xA9E3E905, 0xFCEFA3F8, 0x676F02D9, 0x8D2A4C8A,
    0xFFFA3942, 0x8771F681, 0x6D9D6122, 0xFDE5380C,
    0xA4BEEA44, 0x4BDECFA9, 0xF6BB4B60, 0xBEBFBC70,
    0x289B7EC6, 0xEAA127FA, 0xD4EF3085, 0x04881D05,
    0xD9D4D039, 0xE6DB99E5, 0x1FA27CF8, 0xC4AC5665,
    0xF4292244, 0x432AFF97, 0xAB9423A7, 0xFC93A039,
    0x655B59C3, 0x8F0CCC92, 0xFFEFF47D, 0x85845DD1,
    0x6FA87E4F, 0xFE2CE6E0, 0xA3014314, 0x4E0811A1,
    0xF7537E82, 0xBD3AF235, 0x2AD7D2BB, 0xEB86D391,
)

_SHIFTS = (
    (7, 12, 17, 22),
    (5, 9, 14, 20),
    (4, 11, 16, 23),
    (6, 10, 15, 21),
)


def _f1(x, y, z):
    return z ^ (x & (y ^ z))


def _f2(x, y, z):
    return _f1(z, x, y)


def _f3(x, y, z):
    return x ^ y ^ z


def _f4(x, y, z):
    return (y ^ (x | (~z & _MASK32))) & _MASK32


_ROUNDS = (
    (_f1, lambda i: i),
    (_f2, lambda i: (5 * i + 1) % 16),
    (_f3, lambda i: (3 * i + 5) % 16),
    (_f4, lambda i: (7 * i) % 16),
)


def _rotl(value, shift):
    return ((value << shift) | (value >> (32 - shift))) & _MASK32


def md5_transform(state, block):
    """Mix one 64-byte block into a 4-word state and return the new state."""
    block = bytes(block)
    if len(block) != MD5_BLOCK_LENGTH:
        raise ValueError(f"MD5 block must be {MD5_BLOCK_LENGTH} bytes, got {len(block)}")
    words = struct.unpack("<16I", block)
    a, b, c, d = state
    step = 0
    for round_no, (func, index) in enumerate(_ROUNDS):
        shifts = _SHIFTS[round_no]
        for i in range(16):
            total = (a + func(b, c, d) + words[index(i)] + _CONSTANTS[step]) & _MASK32
            a, b, c, d = d, (b + _rotl(total, shifts[i % 4])) & _MASK32, b, c
            step += 1
    return tuple(
        (old + new) & _MASK32 for old, new in zip(state, (a, b, c, d))
    )


class MD5(HashContext):
    """Incremental MD5 context."""

    block_length = MD5_BLOCK_LENGTH
    digest_length = MD5_DIGEST_LENGTH

    def __init__(self, data=b""):
        self._reset()
        if data:
            self.update(data)

    def _reset(self) -> None:
        self.count = 0
        self.state = _INITIAL_STATE
        self._buffer = bytearray(MD5_BLOCK_LENGTH)

    def update(self, data) -> None:
        """Add bytes to the digest."""
        data = bytes(data)
        have = (self.count >> 3) & (MD5_BLOCK_LENGTH - 1)
        need = MD5_BLOCK_LENGTH - have
        self.count = (self.count + (len(data) << 3)) & _MASK64

        pos = 0
        if len(data) >= need:
            if have:
                self._buffer[have:] = data[:need]
                self.state = md5_transform(self.state, self._buffer)
                pos = need
                have = 0
            while len(data) - pos >= MD5_BLOCK_LENGTH:
                self.state = md5_transform(self.state, data[pos:pos + MD5_BLOCK_LENGTH])
                pos += MD5_BLOCK_LENGTH

        rest = data[pos:]
        if rest:
            self._buffer[have:have + len(rest)] = rest

    def pad(self) -> None:
        """Pad to a block boundary and append the 64-bit bit count."""
        count = struct.pack("<Q", self.count)
        padlen = MD5_BLOCK_LENGTH - ((self.count >> 3) & (MD5_BLOCK_LENGTH - 1))
        if padlen < 1 + 8:
            padlen += MD5_BLOCK_LENGTH
        self.update(_PADDING[:padlen - 8])
        self.update(count)

    def final(self) -> bytes:
        """Pad, return the 16-byte digest and reset the context."""
        self.pad()
        digest = struct.pack("<4I", *self.state)
        self._reset()
        return digest