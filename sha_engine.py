"""Incremental SHA-1 / SHA-2 hashing.

Typical use:

    ctx = new("sha256")
    update(ctx, b"hello ")
    update(ctx, b"world")
    digest = finalize(ctx)

or the equivalent `HashContext` methods. A context accepts any number of
`update` calls, produces exactly one digest, and refuses further use with
`InvalidStateError` until it is explicitly restarted.

A context must only be used by one caller at a time. Independent contexts
share no mutable state and can run concurrently.
"""

from __future__ import annotations

import enum
import hmac
import logging
from typing import List, Optional, Union

from errors import InvalidStateError, LengthOverflowError
from finalize import finalize_digest
from padding import pad_tail
from sha_constants import DESCRIPTORS, AlgorithmDescriptor, get_descriptor
from strategy import TransformStrategy, select_strategy


Variant = Union[str, AlgorithmDescriptor]

log = logging.getLogger("[ShaEngine]")


class ContextState(enum.Enum):
    ACCEPTING = "accepting"
    FINALIZING = "finalizing"
    FINALIZED = "finalized"


class HashContext:
    """Running hash computation for one message."""

    def __init__(
        self,
        variant: Variant,
        data: bytes = b"",
        strategy: Union[str, TransformStrategy, None] = None,
    ):
        self.descriptor = get_descriptor(variant)
        if not isinstance(strategy, TransformStrategy):
            strategy = select_strategy(strategy)
        self.strategy = strategy
        self._reset()
        log.debug("new %s context (strategy %s)", self.descriptor.name, strategy.name)
        if data:
            self.update(data)

    def _reset(self) -> None:
        self._state = tuple(self.descriptor.initial_state)
        self._buffer = bytearray(self.descriptor.block_size)
        self._fill = 0
        self._bit_length = 0
        self._digest: Optional[bytes] = None
        self.state = ContextState.ACCEPTING

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def digest_size(self) -> int:
        return self.descriptor.digest_size

    @property
    def block_size(self) -> int:
        return self.descriptor.block_size

    @property
    def bit_length(self) -> int:
        """Number of message bits accepted so far."""
        return self._bit_length

    @property
    def digest(self) -> Optional[bytes]:
        """The digest produced by `finalize`, or None before that."""
        return self._digest

    def _check_accepting(self, operation: str) -> None:
        if self.state is not ContextState.ACCEPTING:
            raise InvalidStateError(
                f"Cannot {operation} a {self.descriptor.name} context in state "
                f"{self.state.value}; call restart() first"
            )

    def update(self, data: bytes) -> None:
        """Append `data` to the message.

        Args:
          data: Any bytes-like object; may be empty.
        """
        self._check_accepting("update")

        view = memoryview(data)
        if view.ndim != 1 or view.itemsize != 1:
            view = view.cast("B")
        count = len(view)
        if not count:
            return

        bit_length = self._bit_length + count * 8
        if bit_length > self.descriptor.max_bit_length:
            raise LengthOverflowError(
                f"{self.descriptor.name} input exceeds {self.descriptor.max_bit_length} bits"
            )
        self._bit_length = bit_length

        bs = self.descriptor.block_size
        process = self.strategy.process
        idx = 0

        if self._fill:
            i = min(bs - self._fill, count)
            self._buffer[self._fill : self._fill + i] = view[:i]
            self._fill += i
            idx = i
            if self._fill < bs:
                return
            self._state = process(self.descriptor, self._state, bytes(self._buffer))
            self._fill = 0

        whole = (count - idx) - (count - idx) % bs
        if whole:
            self._state = process(self.descriptor, self._state, view[idx : idx + whole])
            idx += whole

        rest = count - idx
        self._buffer[:rest] = view[idx:]
        self._fill = rest

    def finalize(self) -> bytes:
        """Pad the message, compress the final block(s) and return the digest.

        If the transform fails, the exception propagates and the context is
        back in ACCEPTING with its buffered input intact.
        """
        self._check_accepting("finalize")
        self.state = ContextState.FINALIZING

        d = self.descriptor
        try:
            tail = pad_tail(
                bytes(self._buffer[: self._fill]), self._bit_length, d.block_size, d.length_field_size
            )
            state = self.strategy.process(d, self._state, tail)
            digest = finalize_digest(state, d)
        except Exception:
            self.state = ContextState.ACCEPTING
            raise
        self._state = state
        self._digest = digest

        self._buffer = bytearray(d.block_size)
        self._fill = 0
        self.state = ContextState.FINALIZED
        log.debug("finalized %s over %d bits", d.name, self._bit_length)
        return self._digest

    def verify(self, expected: bytes) -> bool:
        """Finalize and compare against `expected` in constant time."""
        return hmac.compare_digest(self.finalize(), bytes(expected))

    def copy(self) -> "HashContext":
        """Return an independent duplicate of this context."""
        other = self.__class__.__new__(self.__class__)
        other.descriptor = self.descriptor
        other.strategy = self.strategy
        other._state = self._state
        other._buffer = bytearray(self._buffer)
        other._fill = self._fill
        other._bit_length = self._bit_length
        other._digest = self._digest
        other.state = self.state
        return other

    def restart(self) -> None:
        """Discard everything and return to a fresh accepting context."""
        self._reset()

    def __repr__(self) -> str:
        return (
            f"<HashContext {self.descriptor.name} {self.state.value} "
            f"bits={self._bit_length}>"
        )


def new(
    variant: Variant,
    data: bytes = b"",
    strategy: Union[str, TransformStrategy, None] = None,
) -> HashContext:
    """Create a fresh context for `variant`, optionally fed with `data`."""
    return HashContext(variant, data, strategy)


def update(context: HashContext, data: bytes) -> None:
    context.update(data)


def finalize(context: HashContext) -> bytes:
    return context.finalize()


def digest_size(variant: Variant) -> int:
    return get_descriptor(variant).digest_size


def block_size(variant: Variant) -> int:
    return get_descriptor(variant).block_size


def algorithm_name(variant: Variant) -> str:
    return get_descriptor(variant).name


def available_algorithms() -> List[str]:
    return [d.name for d in DESCRIPTORS.values()]


def calculate_digest(
    variant: Variant,
    data: bytes,
    strategy: Union[str, TransformStrategy, None] = None,
) -> bytes:
    """One-shot digest of `data`."""
    return HashContext(variant, data, strategy).finalize()


def verify_digest(variant: Variant, data: bytes, expected: bytes) -> bool:
    """Check `expected` against the digest of `data` in constant time."""
    return HashContext(variant, data).verify(expected)
