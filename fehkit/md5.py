"""A pure-Python MD5 message digest (RFC 1321)."""

from __future__ import annotations

import math
import struct

_MASK = 0xFFFFFFFF
_INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476)
_SHIFTS = (
    (7, 12, 17, 22),
    (5, 9, 14, 20),
    (4, 11, 16, 23),
    (6, 10, 15, 21),
)
_T = tuple(int(abs(math.sin(i + 1)) * 4294967296.0) & _MASK for i in range(64))


def _rotate_left(value: int, amount: int) -> int:
    value &= _MASK
    return ((value << amount) | (value >> (32 - amount))) & _MASK


def _process(state: tuple[int, int, int, int], block: bytes) -> tuple[int, int, int, int]:
    """Run one 64-byte block through the compression function."""
    words = struct.unpack("<16I", block)
    a, b, c, d = state
    for i in range(64):
        round_no = i // 16
        if round_no == 0:
            f = (b & c) | (~b & d)
            k = i
        elif round_no == 1:
            f = (b & d) | (c & ~d)
            k = (5 * i + 1) % 16
        elif round_no == 2:
            f = b ^ c ^ d
            k = (3 * i + 5) % 16
        else:
            f = c ^ (b | (~d & _MASK))
            k = (7 * i) % 16
        shift = _SHIFTS[round_no][i % 4]
        rotated = _rotate_left(a + (f & _MASK) + _T[i] + words[k], shift)
        a, d, c, b = d, c, b, (b + rotated) & _MASK
    return tuple((x + y) & _MASK for x, y in zip(state, (a, b, c, d)))  # type: ignore[return-value]


class MD5:
    """Incremental MD5 hasher with a hashlib-like interface."""

    digest_size = 16
    block_size = 64
    name = "md5"

    def __init__(self, data: bytes = b"") -> None:
        self._state: tuple[int, int, int, int] = _INITIAL_STATE
        self._buffer = b""
        self._length = 0
        if data:
            self.update(data)

    def update(self, data: bytes) -> None:
        """Feed more bytes into the digest."""
        if isinstance(data, str):
            raise TypeError("Strings must be encoded before hashing")
        chunk = bytes(data)
        self._length += len(chunk)
        pending = self._buffer + chunk
        full = len(pending) - len(pending) % 64
        state = self._state
        for start in range(0, full, 64):
            state = _process(state, pending[start:start + 64])
        self._state = state
        self._buffer = pending[full:]

    def copy(self) -> "MD5":
        """Return an independent hasher with the same state."""
        clone = MD5()
        clone._state = self._state
        clone._buffer = self._buffer
        clone._length = self._length
        return clone

    def digest(self) -> bytes:
        """Return the 16-byte digest of everything fed so far."""
        bit_length = (self._length * 8) & 0xFFFFFFFFFFFFFFFF
        padding_len = (55 - self._length) % 64 + 1
        tail = self._buffer + b"\x80" + b"\x00" * (padding_len - 1)
        tail += struct.pack("<Q", bit_length)
        state = self._state
        for start in range(0, len(tail), 64):
            state = _process(state, tail[start:start + 64])
        return struct.pack("<4I", *state)

    def hexdigest(self) -> str:
        """Return the digest as lowercase hexadecimal."""
        return self.digest().hex()


def md5_hexdigest(data: bytes) -> str:
    """Return the hex MD5 digest of ``data``."""
    return MD5(data).hexdigest()