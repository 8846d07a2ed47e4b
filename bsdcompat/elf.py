"""ELF identification and the target description of known machines."""

from __future__ import annotations

import platform
import struct
from dataclasses import dataclass
from typing import Optional

ELFMAG = b"\x7fELF"
EI_CLASS = 4
EI_DATA = 5
EI_VERSION = 6

ELFCLASS32 = 1
ELFCLASS64 = 2
ELFDATA2LSB = 1
ELFDATA2MSB = 2
EV_CURRENT = 1

EM_SPARC = 2
EM_386 = 3
EM_68K = 4
EM_MIPS = 8
EM_PARISC = 15
EM_PPC = 20
EM_PPC64 = 21
EM_S390 = 22
EM_ARM = 40
EM_SH = 42
EM_SPARCV9 = 43
EM_IA_64 = 50
EM_X86_64 = 62
EM_M32R = 88
EM_OPENRISC = 92
EM_ALTERA_NIOS2 = 113
EM_AARCH64 = 183
EM_AVR32 = 0x18AD
EM_ALPHA = 0x9026

_E_MACHINE_OFFSET = 18


def is_elf(header) -> bool:
    """Return True if ``header`` starts with the ELF magic number."""
    return bytes(header[:len(ELFMAG)]) == ELFMAG


@dataclass(frozen=True)
class ElfTarget:
    """The machine, word size and byte order of an ELF target."""

    machine: int
    elf_class: int
    data: int
    version: int = EV_CURRENT

    @property
    def bits(self) -> int:
        return 64 if self.elf_class == ELFCLASS64 else 32

    @property
    def byte_order(self) -> str:
        return "little" if self.data == ELFDATA2LSB else "big"

    @staticmethod
    def st_bind(info: int) -> int:
        """Binding part of a symbol's info byte."""
        return (info & 0xFF) >> 4

    @staticmethod
    def st_type(info: int) -> int:
        """Type part of a symbol's info byte."""
        return info & 0x0F

    def matches(self, header) -> bool:
        """Return True if an ELF header was built for this target."""
        header = bytes(header)
        if len(header) < _E_MACHINE_OFFSET + 2 or not is_elf(header):
            return False
        if (header[EI_CLASS], header[EI_DATA], header[EI_VERSION]) != (
            self.elf_class, self.data, self.version
        ):
            return False
        order = "<" if self.data == ELFDATA2LSB else ">"
        (machine,) = struct.unpack_from(order + "H", header, _E_MACHINE_OFFSET)
        return machine == self.machine


_TARGETS = {
    "alpha": ElfTarget(EM_ALPHA, ELFCLASS64, ELFDATA2LSB),
    "x86_64": ElfTarget(EM_X86_64, ELFCLASS64, ELFDATA2LSB),
    "x32": ElfTarget(EM_X86_64, ELFCLASS32, ELFDATA2LSB),
    "arm": ElfTarget(EM_ARM, ELFCLASS32, ELFDATA2LSB),
    "armeb": ElfTarget(EM_ARM, ELFCLASS32, ELFDATA2MSB),
    "aarch64": ElfTarget(EM_AARCH64, ELFCLASS64, ELFDATA2LSB),
    "aarch64_be": ElfTarget(EM_AARCH64, ELFCLASS64, ELFDATA2MSB),
    "avr32": ElfTarget(EM_AVR32, ELFCLASS32, ELFDATA2MSB),
    "avr32el": ElfTarget(EM_AVR32, ELFCLASS32, ELFDATA2LSB),
    "hppa": ElfTarget(EM_PARISC, ELFCLASS32, ELFDATA2MSB),
    "i386": ElfTarget(EM_386, ELFCLASS32, ELFDATA2LSB),
    "ia64": ElfTarget(EM_IA_64, ELFCLASS64, ELFDATA2LSB),
    "m32r": ElfTarget(EM_M32R, ELFCLASS32, ELFDATA2MSB),
    "m32rle": ElfTarget(EM_M32R, ELFCLASS32, ELFDATA2LSB),
    "m68k": ElfTarget(EM_68K, ELFCLASS32, ELFDATA2MSB),
    "mips": ElfTarget(EM_MIPS, ELFCLASS32, ELFDATA2MSB),
    "mipsel": ElfTarget(EM_MIPS, ELFCLASS32, ELFDATA2LSB),
    "nios2": ElfTarget(EM_ALTERA_NIOS2, ELFCLASS32, ELFDATA2LSB),
    "powerpc": ElfTarget(EM_PPC, ELFCLASS32, ELFDATA2MSB),
    "powerpc64": ElfTarget(EM_PPC64, ELFCLASS64, ELFDATA2MSB),
    "sparc": ElfTarget(EM_SPARC, ELFCLASS32, ELFDATA2MSB),
    "sparc64": ElfTarget(EM_SPARCV9, ELFCLASS64, ELFDATA2MSB),
    "sh": ElfTarget(EM_SH, ELFCLASS32, ELFDATA2LSB),
    "sheb": ElfTarget(EM_SH, ELFCLASS32, ELFDATA2MSB),
    "s390": ElfTarget(EM_S390, ELFCLASS32, ELFDATA2MSB),
    "s390x": ElfTarget(EM_S390, ELFCLASS64, ELFDATA2MSB),
    "or1k": ElfTarget(EM_OPENRISC, ELFCLASS32, ELFDATA2MSB),
}

_ALIASES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "armel": "arm",
    "armhf": "arm",
    "armv7l": "arm",
    "armv6l": "arm",
    "arm64": "aarch64",
    "parisc": "hppa",
    "i486": "i386",
    "i586": "i386",
    "i686": "i386",
    "x86": "i386",
    "mipseb": "mips",
    "ppc": "powerpc",
    "ppc64": "powerpc64",
    "sparcv9": "sparc64",
    "sh4": "sh",
    "sh4eb": "sheb",
    "openrisc": "or1k",
}


def target_for_machine(machine: Optional[str] = None) -> ElfTarget:
    """Return the ELF target for a machine name (default: this host).

    Raises ValueError for a machine that is not known.
    """
    name = (machine if machine is not None else platform.machine()).strip().lower()
    name = _ALIASES.get(name, name)
    try:
        return _TARGETS[name]
    except KeyError:
        raise ValueError(f"unknown ELF machine type: {machine!r}") from None