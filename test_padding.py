import pytest

from errors import LengthOverflowError
from padding import final_block_count, pad_message, pad_tail, split_into_blocks
from sha_constants import SHA1, SHA224, SHA256, SHA384, SHA512


ALL = [SHA1, SHA224, SHA256, SHA384, SHA512]


def test_pad_tail_layout_for_abc():
    padded = pad_tail(b"abc", 24, 64, 8)
    assert len(padded) == 64
    assert padded[:4] == b"abc\x80"
    assert padded[4:56] == bytes(52)
    assert padded[56:] == (24).to_bytes(8, "big")


def test_pad_tail_uses_128_bit_length_field():
    padded = pad_tail(b"abc", 24, 128, 16)
    assert len(padded) == 128
    assert padded[3] == 0x80
    assert padded[112:] == (24).to_bytes(16, "big")


def test_pad_tail_empty_message():
    assert pad_tail(b"", 0, 64, 8) == b"\x80" + bytes(63)


@pytest.mark.parametrize("descriptor", ALL)
def test_single_and_two_block_boundary(descriptor):
    bs = descriptor.block_size
    lfs = descriptor.length_field_size
    longest_single = bs - lfs - 1

    one = pad_tail(b"\x61" * longest_single, longest_single * 8, bs, lfs)
    assert len(one) == bs
    assert one[longest_single] == 0x80
    assert final_block_count(longest_single, bs, lfs) == 1

    two = pad_tail(b"\x61" * (longest_single + 1), (longest_single + 1) * 8, bs, lfs)
    assert len(two) == 2 * bs
    assert two[longest_single + 1] == 0x80
    assert two[bs : 2 * bs - lfs] == bytes(bs - lfs)
    assert int.from_bytes(two[-lfs:], "big") == (longest_single + 1) * 8
    assert final_block_count(longest_single + 1, bs, lfs) == 2


def test_bit_length_counts_whole_message_not_tail():
    # 3 blocks already compressed, 5 bytes left in the buffer
    padded = pad_tail(b"hello", (3 * 64 + 5) * 8, 64, 8)
    assert int.from_bytes(padded[56:], "big") == (3 * 64 + 5) * 8


def test_pad_tail_rejects_full_block():
    with pytest.raises(ValueError):
        pad_tail(bytes(64), 512, 64, 8)


def test_pad_tail_rejects_oversized_length():
    with pytest.raises(LengthOverflowError):
        pad_tail(b"", 1 << 64, 64, 8)
    # the same length fits the 128-bit field
    assert len(pad_tail(b"", 1 << 64, 128, 16)) == 128


@pytest.mark.parametrize("descriptor", ALL)
@pytest.mark.parametrize("length", [0, 1, 55, 56, 63, 64, 111, 112, 127, 128, 300])
def test_pad_message_is_block_aligned(descriptor, length):
    message = bytes(length)
    padded = pad_message(message, descriptor)
    assert len(padded) % descriptor.block_size == 0
    assert padded[:length] == message
    assert padded[length] == 0x80
    assert int.from_bytes(padded[-descriptor.length_field_size :], "big") == length * 8


def test_split_into_blocks():
    blocks = split_into_blocks(bytes(192), 64)
    assert len(blocks) == 3
    assert all(len(b) == 64 for b in blocks)

    with pytest.raises(ValueError):
        split_into_blocks(bytes(100), 64)
