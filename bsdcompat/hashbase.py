"""Shared behaviour for incremental message-digest contexts."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod

_BUFSIZ = 8192


class HashContext(ABC):
    """Base for incremental hash contexts.

    Subclasses provide ``update`` and ``final``.  This class adds hex
    rendering and one-shot helpers for byte strings and files.
    """

    digest_length: int = 0
    uppercase: bool = False

    @abstractmethod
    def update(self, data) -> None:
        """Feed more bytes into the digest."""

    @abstractmethod
    def final(self) -> bytes:
        """Finish the digest, return it and reset the context."""

    def end(self) -> str:
        """Finish the digest and return it as a hex string."""
        text = self.final().hex()
        return text.upper() if self.uppercase else text

    @classmethod
    def data(cls, data) -> str:
        """Return the hex digest of ``data``."""
        ctx = cls()
        ctx.update(data)
        return ctx.end()

    @classmethod
    def file(cls, filename) -> str:
        """Return the hex digest of a whole file."""
        return cls.file_chunk(filename, 0, 0)

    @classmethod
    def file_chunk(cls, filename, offset, length) -> str:
        """Return the hex digest of ``length`` bytes of a file from ``offset``.

        A ``length`` of zero means the file's size at open time; if that is
        also zero the file is read to its end.  A positive ``offset`` is
        seeked to first; zero or negative offsets read from the start.
        """
        ctx = cls()
        with open(filename, "rb") as handle:
            if length == 0:
                length = os.fstat(handle.fileno()).st_size
            if length < 0:
                raise ValueError(f"negative length: {length}")
            if offset > 0:
                handle.seek(offset)
            remaining = length
            while True:
                chunk = handle.read(min(_BUFSIZ, remaining) if remaining else _BUFSIZ)
                if not chunk:
                    break
                ctx.update(chunk)
                if remaining > 0:
                    remaining -= len(chunk)
                    if remaining == 0:
                        break
        return ctx.end()