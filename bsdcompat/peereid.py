"""Effective user and group of the process at the other end of a socket."""

from __future__ import annotations

import errno
import os
import socket
import struct
import sys

# struct xucred: cr_version, cr_uid, cr_ngroups, cr_groups[16]
_XUCRED = struct.Struct("IIh2x16I")
_XUCRED_VERSION = 0
_SOL_LOCAL = 0


def _credentials(sock: socket.socket) -> tuple[int, int]:
    peercred = getattr(socket, "SO_PEERCRED", None)
    if peercred is not None:
        if sys.platform.startswith("openbsd"):
            layout = struct.Struct("IIi")  # uid, gid, pid
            uid, gid, _pid = layout.unpack(
                sock.getsockopt(socket.SOL_SOCKET, peercred, layout.size)
            )
        else:
            layout = struct.Struct("iII")  # pid, uid, gid
            _pid, uid, gid = layout.unpack(
                sock.getsockopt(socket.SOL_SOCKET, peercred, layout.size)
            )
        return uid, gid

    local_peercred = getattr(socket, "LOCAL_PEERCRED", None)
    if local_peercred is not None:
        raw = sock.getsockopt(_SOL_LOCAL, local_peercred, _XUCRED.size)
        fields = _XUCRED.unpack(raw.ljust(_XUCRED.size, b"\0"))
        version, uid, groups = fields[0], fields[1], fields[3:]
        if version != _XUCRED_VERSION:
            raise OSError(errno.EINVAL, "unexpected credential structure version")
        return uid, groups[0]

    local_peereid = getattr(socket, "LOCAL_PEEREID", None)
    if local_peereid is not None:
        layout = struct.Struct("iII")  # pid, euid, egid
        _pid, uid, gid = layout.unpack(
            sock.getsockopt(_SOL_LOCAL, local_peereid, layout.size)
        )
        return uid, gid

    # No way to ask the kernel: report our own identity.
    return os.geteuid(), os.getegid()


def getpeereid(sock) -> tuple[int, int]:
    """Return ``(euid, egid)`` of the peer of a connected local socket.

    ``sock`` is a socket object or a file descriptor.  Errors from the
    kernel are raised as OSError.
    """
    if isinstance(sock, socket.socket):
        return _credentials(sock)
    with socket.fromfd(int(sock), socket.AF_UNIX, socket.SOCK_STREAM) as wrapped:
        return _credentials(wrapped)