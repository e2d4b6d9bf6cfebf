"""Message padding and length encoding for SHA-1 and SHA-2.

The padded tail is the buffered bytes, a single 0x80 byte, zero bytes up to
`block_size - length_field_size` modulo the block size, then the message
length in bits as a big-endian integer of `length_field_size` bytes (8 for
the 64-byte-block variants, 16 for the 128-byte-block variants).
"""

from __future__ import annotations

from typing import Iterable, List, Union

from errors import LengthOverflowError
from sha_constants import AlgorithmDescriptor, get_descriptor


def final_block_count(tail_length: int, block_size: int, length_field_size: int) -> int:
    """Number of blocks `pad_tail` produces for a tail of `tail_length` bytes."""
    return 1 if tail_length < block_size - length_field_size else 2


def pad_tail(tail: bytes, bit_length: int, block_size: int, length_field_size: int) -> bytes:
    """Pad the unprocessed tail of a message into one or two final blocks.

    Args:
        tail: Buffered bytes not yet compressed, shorter than one block
        bit_length: Total message length in bits, tail included
        block_size: Block size of the algorithm in bytes
        length_field_size: Size of the encoded length in bytes

    Returns:
        The final block, or two blocks when the tail leaves no room for
        the 0x80 marker plus the length field.
    """
    if len(tail) >= block_size:
        raise ValueError(f"Tail must be shorter than {block_size} bytes, got {len(tail)}")
    if bit_length < 0 or bit_length >= 1 << (8 * length_field_size):
        raise LengthOverflowError(
            f"Message length of {bit_length} bits does not fit a "
            f"{8 * length_field_size}-bit length field"
        )

    padded = bytearray(tail)
    padded.append(0x80)

    while (len(padded) % block_size) != block_size - length_field_size:
        padded.append(0x00)

    padded.extend(bit_length.to_bytes(length_field_size, byteorder="big"))
    return bytes(padded)


def pad_message(message: bytes, variant: Union[str, AlgorithmDescriptor]) -> bytes:
    """Pad a complete message for `variant`.

    The result length is a multiple of the block size.
    """
    descriptor = get_descriptor(variant)
    bs = descriptor.block_size
    whole = len(message) - len(message) % bs
    return bytes(message[:whole]) + pad_tail(
        bytes(message[whole:]), len(message) * 8, bs, descriptor.length_field_size
    )


def _chunks(data: bytes, size: int) -> Iterable[bytes]:
    """Yield successive `size`-byte chunks from `data`."""
    for i in range(0, len(data), size):
        yield data[i : i + size]


def split_into_blocks(padded: bytes, block_size: int) -> List[bytes]:
    """Split a padded message into `block_size`-byte blocks."""
    if len(padded) % block_size != 0:
        raise ValueError(
            f"Padded message length must be a multiple of {block_size} bytes, got {len(padded)}"
        )
    return list(_chunks(bytes(padded), block_size))
