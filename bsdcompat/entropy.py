"""Kernel entropy with fallbacks, and detection of process forks.

``getentropy`` tries the descriptor-less ``getrandom`` call first, then
the ``/dev/urandom`` device node, and finally the hashed system-state
source in :mod:`bsdcompat.entropy_fallback`.  At most 256 bytes may be
asked for at once.
"""

from __future__ import annotations

import errno
import os
import stat
import sys
import weakref

from bsdcompat.entropy_fallback import EntropyError, fallback_entropy, has_data

try:
    import fcntl
except ImportError:  # pragma: no cover - not available on every platform
    fcntl = None

MAX_LENGTH = 256
URANDOM_PATH = "/dev/urandom"

# _IOR('R', 0x00, int): read the entropy count of a Linux random device.
RNDGETENTCNT = 0x80045200


class ForkDetector:
    """Tell a caller when its process state may be shared with a parent.

    ``forked`` is true on its first call, after the process id has changed,
    and after a fork handler has fired in a child process.
    """

    def __init__(self) -> None:
        self._pid = 0
        self._fork_seen = False
        register = getattr(os, "register_at_fork", None)
        if register is not None:
            ref = weakref.ref(self)

            def _on_fork() -> None:
                detector = ref()
                if detector is not None:
                    detector._fork_seen = True

            register(after_in_child=_on_fork)

    def forked(self) -> bool:
        """Return True if state must be reset, and remember the current pid."""
        pid = os.getpid()
        if self._pid == 0 or self._pid != pid or self._fork_seen:
            self._pid = pid
            self._fork_seen = False
            return True
        return False


def _check_length(length: int) -> None:
    if length < 0:
        raise ValueError(f"negative length: {length}")
    if length > MAX_LENGTH:
        raise EntropyError(f"at most {MAX_LENGTH} bytes may be requested")


def entropy_from_getrandom(length: int) -> bytes:
    """Return ``length`` bytes from the kernel's getrandom call.

    Raises OSError with errno ENOSYS where the call does not exist, and
    EntropyError when fewer bytes than asked for came back.
    """
    _check_length(length)
    getrandom = getattr(os, "getrandom", None)
    if getrandom is None:
        raise OSError(errno.ENOSYS, "getrandom is not available")
    data = getrandom(length, 0)
    if len(data) != length:
        raise EntropyError("short read from getrandom")
    return bytes(data)


def _open_flags() -> int:
    flags = os.O_RDONLY
    flags |= getattr(os, "O_NOFOLLOW", 0)
    flags |= getattr(os, "O_CLOEXEC", 0)
    return flags


def _looks_like_random_device(fd: int) -> bool:
    if fcntl is None or not sys.platform.startswith("linux"):
        return True
    try:
        fcntl.ioctl(fd, RNDGETENTCNT, bytearray(4))
    except OSError:
        return False
    return True


def entropy_from_device(length: int, path: str = URANDOM_PATH,
                        devfs_check: bool = True) -> bytes:
    """Return ``length`` bytes read from a random device node.

    The node must be a character device and is opened without following
    symbolic links.  With ``devfs_check`` the node must also answer the
    kernel's random-device query.  Any failure raises EntropyError.
    """
    _check_length(length)
    try:
        fd = os.open(path, _open_flags())
    except OSError as exc:
        raise EntropyError(f"cannot open {path}: {exc.strerror}") from exc

    try:
        try:
            mode = os.fstat(fd).st_mode
        except OSError as exc:
            raise EntropyError(f"cannot stat {path}") from exc
        if not stat.S_ISCHR(mode):
            raise EntropyError(f"{path} is not a character device")
        if devfs_check and not _looks_like_random_device(fd):
            raise EntropyError(f"{path} is not a random device")

        out = bytearray()
        while len(out) < length:
            try:
                chunk = os.read(fd, length - len(out))
            except BlockingIOError:
                continue
            except OSError as exc:
                raise EntropyError(f"cannot read {path}") from exc
            if not chunk:
                raise EntropyError(f"unexpected end of {path}")
            out += chunk
    finally:
        os.close(fd)

    if not has_data(out):
        raise EntropyError(f"{path} returned only zero bytes")
    return bytes(out)


def getentropy(length: int) -> bytes:
    """Return ``length`` (at most 256) bytes of entropy.

    Tries getrandom, then the urandom device, then the hashed fallback.
    """
    _check_length(length)
    try:
        return entropy_from_getrandom(length)
    except OSError as exc:
        if isinstance(exc, EntropyError) or exc.errno != errno.ENOSYS:
            raise

    try:
        return entropy_from_device(length, URANDOM_PATH, True)
    except EntropyError:
        pass

    try:
        return fallback_entropy(length)
    except EntropyError:
        raise
    except OSError as exc:
        raise EntropyError("fallback entropy failed") from exc