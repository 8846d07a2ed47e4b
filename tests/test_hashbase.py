import hashlib

import pytest

from bsdcompat.md5 import MD5


class UpperMD5(MD5):
    uppercase = True


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "sample.bin"
    payload = bytes(range(256)) * 100
    path.write_bytes(payload)
    return path, payload


def test_data_matches_reference():
    payload = b"The quick brown fox jumps over the lazy dog"
    assert MD5.data(payload) == hashlib.md5(payload).hexdigest()


def test_end_is_lowercase_hex_of_final():
    ctx = MD5()
    ctx.update(b"hello")
    text = ctx.end()
    assert text == hashlib.md5(b"hello").hexdigest()
    assert len(text) == 32
    assert text == text.lower()


def test_uppercase_subclass():
    lower = MD5.data(b"hello")
    upper = UpperMD5.data(b"hello")
    assert lower == hashlib.md5(b"hello").hexdigest()
    assert upper == lower.upper()


def test_file_whole(sample_file):
    path, payload = sample_file
    assert MD5.file(path) == hashlib.md5(payload).hexdigest()


def test_file_chunk_offset_and_length(sample_file):
    path, payload = sample_file
    assert MD5.file_chunk(path, 100, 5000) == hashlib.md5(payload[100:5100]).hexdigest()


def test_file_chunk_zero_length_reads_from_offset_for_file_size(sample_file):
    path, payload = sample_file
    # length 0 means the file size; starting at an offset the read stops at EOF
    assert MD5.file_chunk(path, 1000, 0) == hashlib.md5(payload[1000:]).hexdigest()


def test_file_chunk_negative_offset_reads_from_start(sample_file):
    path, payload = sample_file
    assert MD5.file_chunk(path, -5, 10) == hashlib.md5(payload[:10]).hexdigest()


def test_file_chunk_large_length_stops_at_eof(sample_file):
    path, payload = sample_file
    assert MD5.file_chunk(path, 0, len(payload) * 3) == hashlib.md5(payload).hexdigest()


def test_empty_file(tmp_path):
    path = tmp_path / "empty"
    path.write_bytes(b"")
    assert MD5.file(path) == hashlib.md5(b"").hexdigest()


def test_file_chunk_negative_length_raises(sample_file):
    path, _ = sample_file
    with pytest.raises(ValueError):
        MD5.file_chunk(path, 0, -1)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        MD5.file(tmp_path / "missing")