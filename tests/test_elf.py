import struct

import pytest

from bsdcompat.elf import (
    ELFCLASS32,
    ELFCLASS64,
    ELFDATA2LSB,
    ELFDATA2MSB,
    ELFMAG,
    EM_386,
    EM_AARCH64,
    EM_SPARC,
    EM_SPARCV9,
    EM_X86_64,
    EV_CURRENT,
    ElfTarget,
    is_elf,
    target_for_machine,
)


def _header(target: ElfTarget) -> bytes:
    ident = ELFMAG + bytes([target.elf_class, target.data, target.version]) + bytes(9)
    order = "<" if target.data == ELFDATA2LSB else ">"
    return ident + struct.pack(order + "HH", 2, target.machine)


def test_is_elf_accepts_magic():
    assert is_elf(b"\x7fELF\x02\x01\x01")


@pytest.mark.parametrize("data", [b"MZ\x90\x00", b"\x7fEL", b"", b"\x7felf"])
def test_is_elf_rejects_other_data(data):
    assert not is_elf(data)


def test_x86_64_target():
    target = target_for_machine("x86_64")
    assert target.machine == EM_X86_64
    assert target.elf_class == ELFCLASS64
    assert target.data == ELFDATA2LSB
    assert target.bits == 64


def test_aliases_resolve_to_same_target():
    assert target_for_machine("amd64") == target_for_machine("x86_64")
    assert target_for_machine("i686") == target_for_machine("i386")
    assert target_for_machine("AArch64") == target_for_machine("arm64")


def test_i386_is_32_bit_little_endian():
    target = target_for_machine("i386")
    assert (target.machine, target.elf_class, target.byte_order) == (EM_386, ELFCLASS32, "little")


def test_sparc_word_size_selects_machine():
    assert target_for_machine("sparc").machine == EM_SPARC
    assert target_for_machine("sparc64").machine == EM_SPARCV9


def test_big_endian_variant():
    assert target_for_machine("aarch64_be").data == ELFDATA2MSB
    assert target_for_machine("aarch64_be").machine == EM_AARCH64


def test_unknown_machine_raises():
    with pytest.raises(ValueError):
        target_for_machine("vax")


@pytest.mark.parametrize("name", ["x86_64", "i386", "mips", "mipsel", "s390x", "or1k"])
def test_matches_own_header(name):
    target = target_for_machine(name)
    assert target.version == EV_CURRENT
    assert target.matches(_header(target))


def test_does_not_match_other_machine():
    header = _header(target_for_machine("i386"))
    assert not target_for_machine("x86_64").matches(header)
    assert not target_for_machine("i386").matches(header[:10])


@pytest.mark.parametrize("bind", range(16))
def test_symbol_info_round_trip(bind):
    for kind in range(16):
        info = (bind << 4) | kind
        assert ElfTarget.st_bind(info) == bind
        assert ElfTarget.st_type(info) == kind