import hashlib

import pytest

from fehkit.md5 import MD5, md5_hexdigest

RFC_VECTORS = [
    (b"", "d41d8cd98f00b204e9800998ecf8427e"),
    (b"a", "0cc175b9c0f1b6a831c399e269772661"),
    (b"abc", "900150983cd24fb0d6963f7d28e17f72"),
    (b"message digest", "f96b697d7cb7938d525a2f31aaf161d0"),
    (b"abcdefghijklmnopqrstuvwxyz", "c3fcd3d76192e4007dfb496cca67e13b"),
    (
        b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789",
        "d174ab98d277d9f5a5611c2c9f419d9f",
    ),
    (
        b"1234567890" * 8,
        "57edf4a22be3c955ac49da2e2107b67a",
    ),
]


@pytest.mark.parametrize("data,expected", RFC_VECTORS)
def test_rfc_vectors(data, expected):
    assert md5_hexdigest(data) == expected


@pytest.mark.parametrize("length", [0, 1, 55, 56, 57, 63, 64, 65, 119, 120, 128, 200, 1000])
def test_matches_hashlib_at_block_boundaries(length):
    data = bytes((i * 7 + 3) % 256 for i in range(length))
    assert MD5(data).digest() == hashlib.md5(data).digest()


def test_incremental_equals_one_shot():
    data = b"The quick brown fox jumps over the lazy dog" * 5
    hasher = MD5()
    for start in range(0, len(data), 13):
        hasher.update(data[start:start + 13])
    assert hasher.hexdigest() == md5_hexdigest(data)


def test_digest_does_not_finalise_state():
    hasher = MD5(b"abc")
    first = hasher.hexdigest()
    assert hasher.hexdigest() == first
    hasher.update(b"def")
    assert hasher.hexdigest() == md5_hexdigest(b"abcdef")


def test_copy_is_independent():
    hasher = MD5(b"prefix-")
    clone = hasher.copy()
    clone.update(b"one")
    hasher.update(b"two")
    assert clone.hexdigest() == md5_hexdigest(b"prefix-one")
    assert hasher.hexdigest() == md5_hexdigest(b"prefix-two")


def test_digest_length():
    assert len(MD5(b"xyz").digest()) == 16
    assert len(MD5(b"xyz").hexdigest()) == 32


def test_str_rejected():
    with pytest.raises(TypeError):
        MD5().update("text")