"""Last-resort entropy gathered by hashing volatile system state.

This source is for when no kernel random source can be reached, for
example inside a chroot without device nodes or when file descriptors
have run out.  It hashes clocks, process identifiers, resource usage,
file-system statistics, memory-mapping addresses and a running counter
with SHA-512, and returns as many bytes as asked for.
"""

from __future__ import annotations

import errno
import mmap
import os
import signal
import socket
import stat
import threading
import time
from dataclasses import dataclass

from bsdcompat.sha512 import SHA512, SHA512_DIGEST_LENGTH

try:
    import resource
except ImportError:  # pragma: no cover - not available on every platform
    resource = None

try:
    import termios
except ImportError:  # pragma: no cover - not available on every platform
    termios = None

REPEAT = 5

_MASK32 = 0xFFFFFFFF

# Prime-sized mappings encourage fragmentation and so expose address entropy.
_MAPPING_PAGES = (17, 3, 11, 2, 5, 3, 7, 1, 57, 3, 131, 1)

_CLOCK_NAMES = (
    "CLOCK_REALTIME",
    "CLOCK_MONOTONIC",
    "CLOCK_MONOTONIC_RAW",
    "CLOCK_TAI",
    "CLOCK_VIRTUAL",
    "CLOCK_UPTIME",
    "CLOCK_PROCESS_CPUTIME_ID",
    "CLOCK_THREAD_CPUTIME_ID",
)

_FAILURES: tuple[type[BaseException], ...] = (OSError, ValueError)
if termios is not None:
    _FAILURES += (termios.error,)


class EntropyError(OSError):
    """Raised when no usable entropy could be produced (errno EIO)."""

    def __init__(self, message: str = "entropy source failed") -> None:
        super().__init__(errno.EIO, message)


@dataclass
class _State:
    counter: int = 0
    last_pid: int = 0

    def add(self, value: int) -> None:
        self.counter = (self.counter + int(value)) & _MASK32


_state = _State()
_lock = threading.Lock()


def has_data(buf) -> bool:
    """Return True if any byte of ``buf`` is non-zero."""
    return any(bytes(buf))


def _clock_ids() -> list[int]:
    if not hasattr(time, "clock_gettime_ns"):
        return []
    return [
        getattr(time, name) for name in _CLOCK_NAMES if hasattr(time, name)
    ]


def _encode(value) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    return repr(value).encode()


def _absorb(ctx: SHA512, func, *args):
    """Hash what ``func`` returns, or the error number if it fails."""
    if func is None:
        ctx.update(_encode(errno.ENOSYS))
        return None
    try:
        result = func(*args)
    except _FAILURES as exc:
        ctx.update(_encode(getattr(exc, "errno", None) or errno.EIO))
        return None
    ctx.update(_encode(result))
    return result


def _wall_clock(ctx: SHA512) -> None:
    now = _absorb(ctx, time.time_ns)
    if now is not None:
        seconds, nanos = divmod(now, 1_000_000_000)
        _state.add(seconds)
        _state.add(nanos // 1000)


def _user_time(ctx: SHA512, who: int) -> None:
    if resource is None:
        _absorb(ctx, None)
        return
    usage = _absorb(ctx, resource.getrusage, who)
    if usage is not None:
        seconds = int(usage.ru_utime)
        _state.add(seconds)
        _state.add(int((usage.ru_utime - seconds) * 1_000_000))


def _clocks(ctx: SHA512, *, count: bool) -> None:
    for clock in _clock_ids():
        value = _absorb(ctx, time.clock_gettime_ns, clock)
        if count and value is not None:
            _state.add(value % 1_000_000_000)


def _peer_name(fd: int):
    dup = os.dup(fd)
    try:
        sock = socket.socket(fileno=dup)
    except OSError:
        os.close(dup)
        raise
    with sock:
        return sock.getpeername()


def _touch_mappings(ctx: SHA512, page_size: int) -> None:
    mappings = []
    try:
        for pages in _MAPPING_PAGES:
            size = pages * page_size
            mapping = _absorb(ctx, mmap.mmap, -1, size)
            if mapping is not None:
                mappings.append(mapping)
                mapping[_state.counter % (size - 1)] = 1
                _state.add(id(mapping) // page_size)
            _absorb(ctx, time.monotonic_ns)
            _clocks(ctx, count=True)
            if resource is not None:
                _user_time(ctx, resource.RUSAGE_SELF)
    finally:
        for mapping in mappings:
            mapping.close()


def _file_system(ctx: SHA512) -> None:
    statvfs = getattr(os, "statvfs", None)
    fstatvfs = getattr(os, "fstatvfs", None)
    for path in (".", "/"):
        _absorb(ctx, os.stat, path)
        _absorb(ctx, statvfs, path)

    st = _absorb(ctx, os.fstat, 0)
    if st is None:
        return
    mode = st.st_mode
    if stat.S_ISREG(mode) or stat.S_ISFIFO(mode) or stat.S_ISSOCK(mode):
        _absorb(ctx, fstatvfs, 0)
        _absorb(ctx, os.lseek, 0, 0, os.SEEK_CUR)
    if stat.S_ISCHR(mode):
        _absorb(ctx, termios.tcgetattr if termios is not None else None, 0)
    elif stat.S_ISSOCK(mode):
        _absorb(ctx, _peer_name, 0)


def _process(ctx: SHA512) -> None:
    pid = _absorb(ctx, os.getpid)
    getsid = getattr(os, "getsid", None)
    _absorb(ctx, getsid, pid if pid is not None else 0)
    _absorb(ctx, os.getppid)
    _absorb(ctx, getattr(os, "getpgid", None), 0)
    getpriority = getattr(os, "getpriority", None)
    _absorb(ctx, getpriority, getattr(os, "PRIO_PROCESS", 0), 0)
    _absorb(ctx, getattr(os, "getloadavg", None))


def _signals(ctx: SHA512) -> None:
    _absorb(ctx, getattr(signal, "sigpending", None))
    sigmask = getattr(signal, "pthread_sigmask", None)
    _absorb(ctx, sigmask, getattr(signal, "SIG_BLOCK", 0), [])


def _addresses(ctx: SHA512) -> None:
    marker = object()
    for value in (id(fallback_entropy), id(print), id(marker), id(errno)):
        ctx.update(_encode(value))


def fallback_entropy(length: int) -> bytes:
    """Return ``length`` bytes hashed from volatile system state.

    Raises ValueError for a negative length and EntropyError when the
    result holds no non-zero byte (which includes a length of zero).
    """
    if length < 0:
        raise ValueError(f"negative length: {length}")

    page_size = mmap.PAGESIZE
    out = bytearray()
    with _lock:
        pid = os.getpid()
        if _state.last_pid == pid:
            faster, repeat = True, 2
        else:
            faster, repeat = False, REPEAT
            _state.last_pid = pid

        results = b""
        while len(out) < length:
            ctx = SHA512()
            first_block = not out
            for _ in range(repeat):
                _wall_clock(ctx)
                _absorb(ctx, time.monotonic_ns)
                _absorb(ctx, time.perf_counter_ns)
                _clocks(ctx, count=False)
                _process(ctx)

                if not faster:
                    time.sleep(1e-9)

                _signals(ctx)
                _addresses(ctx)

                if first_block:
                    _touch_mappings(ctx, page_size)
                    _file_system(ctx)
                    if resource is not None:
                        _user_time(ctx, resource.RUSAGE_CHILDREN)
                    else:
                        _absorb(ctx, None)
                else:
                    # Later blocks absorb the previous result.
                    ctx.update(results)

                _wall_clock(ctx)
                ctx.update(_encode(_state.counter))

            results = ctx.final()
            out += results[:min(SHA512_DIGEST_LENGTH, length - len(out))]

    if not has_data(out):
        raise EntropyError()
    return bytes(out)