"""BSD library routines: MD5 and SHA-512 digests, entropy, sorting, number formatting, IPv4 network parsing, ICMP and ELF helpers."""

__version__ = "0.1.0"