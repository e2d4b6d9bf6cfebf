"""Serialization of the final chaining value into a digest."""

from __future__ import annotations

from typing import Sequence, Union

from sha_constants import AlgorithmDescriptor, get_descriptor


def serialize_state(state: Sequence[int], word_bytes: int) -> bytes:
    """Concatenate the state words, each big-endian in `word_bytes` bytes."""
    return b"".join(word.to_bytes(word_bytes, byteorder="big") for word in state)


def finalize_digest(state: Sequence[int], variant: Union[str, AlgorithmDescriptor]) -> bytes:
    """Convert a final chaining value into the digest of `variant`.

    SHA-224 and SHA-384 keep only the front of the serialized state
    (dropping 4 and 16 bytes respectively).
    """
    descriptor = get_descriptor(variant)
    return serialize_state(state, descriptor.word_bytes)[: descriptor.digest_size]
