import hashlib
import struct

import pytest

from bsdcompat.md5 import MD5, md5_transform


def test_empty_digest_rfc_value():
    assert MD5().final().hex() == "d41d8cd98f00b204e9800998ecf8427e"


def test_abc_digest_rfc_value():
    assert MD5(b"abc").final().hex() == "900150983cd24fb0d6963f7d28e17f72"


@pytest.mark.parametrize("size", [0, 1, 55, 56, 57, 63, 64, 65, 127, 128, 1000])
def test_lengths_match_reference(size):
    payload = bytes((i * 7 + 3) % 256 for i in range(size))
    assert MD5(payload).final() == hashlib.md5(payload).digest()


def test_incremental_equals_one_shot():
    payload = bytes(range(200)) * 3
    ctx = MD5()
    for start in range(0, len(payload), 13):
        ctx.update(payload[start:start + 13])
    assert ctx.final() == MD5(payload).final()


def test_final_resets_context():
    ctx = MD5(b"something")
    ctx.final()
    assert ctx.count == 0
    assert ctx.final() == hashlib.md5(b"").digest()


def test_count_tracks_bits():
    ctx = MD5()
    ctx.update(b"x" * 10)
    ctx.update(b"y" * 5)
    assert ctx.count == 15 * 8


def test_pad_reaches_block_boundary():
    for size in (0, 10, 55, 56, 64, 120):
        ctx = MD5(b"a" * size)
        ctx.pad()
        assert ctx.count % 512 == 0
        assert ctx.count > size * 8


def test_transform_single_padded_block():
    initial = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)
    block = b"\x80" + bytes(63)
    state = md5_transform(initial, block)
    assert struct.pack("<4I", *state) == hashlib.md5(b"").digest()


def test_transform_rejects_wrong_block_size():
    with pytest.raises(ValueError):
        md5_transform((0, 0, 0, 0), b"short")


def test_accepts_bytearray_and_memoryview():
    payload = b"buffer types"
    expected = hashlib.md5(payload).digest()
    assert MD5(bytearray(payload)).final() == expected
    assert MD5(memoryview(payload)).final() == expected


def test_end_hex():
    assert MD5(b"hello world").end() == hashlib.md5(b"hello world").hexdigest()