# bsdcompat

Pure-Python versions of a set of classic BSD library routines. The package
has no dependencies outside the standard library.

## Modules

### Digests

- `bsdcompat.md5.MD5` and `bsdcompat.sha512.SHA512` are incremental digest
  contexts. `update(data)` adds bytes, `final()` returns the raw digest and
  resets the context, and `end()` returns the digest as lower-case hex.
  `MD5` also has `pad()`. The block functions `md5_transform(state, block)`
  and `sha512_transform(state, block)` return the new state for one block.
- Both classes build on `bsdcompat.hashbase.HashContext`, which provides the
  class methods `data(data)`, `file(filename)` and
  `file_chunk(filename, offset, length)`. A `length` of zero means the file's
  size; a negative length raises `ValueError`.

### Entropy

- `bsdcompat.entropy.getentropy(length)` returns up to 256 bytes. It tries
  `entropy_from_getrandom`, then `entropy_from_device` on `/dev/urandom`
  (which must be a character device, opened without following links), and
  finally `bsdcompat.entropy_fallback.fallback_entropy`. Asking for more than
  256 bytes, or a failure of every source, raises
  `bsdcompat.entropy_fallback.EntropyError`, an `OSError` with errno `EIO`.
- `fallback_entropy(length)` hashes clocks, process ids, resource usage,
  file-system statistics, memory mappings and a running counter with
  SHA-512. `has_data(buf)` tells whether any byte is non-zero.
- `bsdcompat.entropy.ForkDetector().forked()` returns `True` on its first
  call and whenever the process id has changed or a fork has happened since
  the last call.

### Sockets

- `bsdcompat.peereid.getpeereid(sock)` returns `(euid, egid)` of the peer of a
  connected Unix-domain socket, given a socket object or a file descriptor.
  Where the platform offers no way to ask, it returns the calling process's
  own ids.

### Sorting

- `bsdcompat.sorting.heapsort(items, compare=None)` and
  `bsdcompat.sorting.mergesort(items, compare=None)` sort a mutable sequence
  in place. `compare(a, b)` returns a negative number, zero or a positive
  number; without it the items' natural order is used. `mergesort` is stable,
  `heapsort` is not.

### Formatting

- `bsdcompat.humanize.humanize_number(number, suffix, scale, flags, length)`
  renders a number to fit a buffer of `length` bytes (so at most
  `length - 1` characters). `scale` is a power of the divisor, or
  `HumanizeFlag.AUTOSCALE` to pick one, or `HumanizeFlag.GETSCALE` to return
  that power as an `int`. The flags `DECIMAL`, `NOSPACE`, `B` and
  `DIVISOR_1000` change the output. Requests that cannot be met raise
  `ValueError`.

### Networking

- `bsdcompat.inet.inet_net_pton(family, src, size=4)` parses an IPv4 network
  number (dotted decimal or `0x` hex, with an optional `/width`) and returns
  `(bits, address_bytes)`. Without a width the mask comes from the address
  class. Errors are `OSError` with errno `ENOENT` (not a network), `EMSGSIZE`
  (does not fit) or `EAFNOSUPPORT` (family other than `AF_INET`).
- `bsdcompat.icmp` has `IcmpType`, `is_info_type(icmp_type)`,
  `internet_checksum(data)` and `IcmpHeader`, with `unpack(data)`, `pack()`,
  `echo(identifier, sequence, data=b"", reply=False)`, `with_checksum()` and
  properties for the type-dependent fields.

### ELF

- `bsdcompat.elf.is_elf(header)` checks the ELF magic number.
- `bsdcompat.elf.target_for_machine(machine=None)` returns the `ElfTarget`
  (machine, class, byte order) for a machine name, or for this host; unknown
  names raise `ValueError`. `ElfTarget.matches(header)` checks an ELF header
  against the target.

## Example

```python
from bsdcompat.md5 import MD5
from bsdcompat.humanize import humanize_number, HumanizeFlag
from bsdcompat.sorting import mergesort
from bsdcompat.inet import inet_net_pton
import socket

print(MD5.data(b"abc"))   # 900150983cd24fb0d6963f7d28e17f72

items = [3, 1, 2]
mergesort(items)
print(items)              # [1, 2, 3]

print(humanize_number(1536, "B", HumanizeFlag.AUTOSCALE, HumanizeFlag.DECIMAL, 7))
# 1.5 KB

print(inet_net_pton(socket.AF_INET, "192.168.1.0/24"))
# (24, b'\xc0\xa8\x01')
```

## What it does not do

This is a library only: it installs no command-line tools.

## Tests

```
pip install -e .[test]
pytest
```