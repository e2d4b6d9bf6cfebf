"""Multi-block transform strategies.

A strategy compresses a run of whole blocks of one stream:

    state = strategy.process(descriptor, state, data)

where ``len(data)`` is a multiple of the descriptor's block size. Every
strategy must return exactly the state that repeated single-block calls to
`compress.transform` would return.

``portable`` drives the round functions in `compress` one block at a time.
``unrolled`` inlines the round loop and unpacks words with `struct`, which
is several times faster under CPython. Both need only the standard library
and are always available, so without registrations "auto" resolves to
``unrolled``. Other accelerated implementations, such as an extension
module that may be missing at runtime, are added with `register_strategy`
and report their presence through ``available``; "auto" skips them when
it returns False.
"""

from __future__ import annotations

import logging
import os
import struct
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from compress import TRANSFORMS, State
from errors import ConfigurationError
from sha_constants import K512_VALUES, K_VALUES, MASK32, MASK64, AlgorithmDescriptor


STRATEGY_ENV = "SHA_ENGINE_STRATEGY"

log = logging.getLogger("[Strategy]")


@dataclass(frozen=True)
class TransformStrategy:
    name: str
    process: Callable[[AlgorithmDescriptor, State, bytes], State]
    available: Callable[[], bool] = lambda: True


def _portable_process(descriptor: AlgorithmDescriptor, state: State, data: bytes) -> State:
    block_size = descriptor.block_size
    fn = TRANSFORMS[descriptor.family]
    for offset in range(0, len(data), block_size):
        state = fn(state, bytes(data[offset : offset + block_size]))
    return state


_WORDS32 = struct.Struct(">16L")
_WORDS64 = struct.Struct(">16Q")


def _sha1_blocks(state: Sequence[int], data: bytes) -> State:
    h0, h1, h2, h3, h4 = state
    for offset in range(0, len(data), 64):
        w = list(_WORDS32.unpack_from(data, offset))
        for t in range(16, 80):
            x = w[t - 3] ^ w[t - 8] ^ w[t - 14] ^ w[t - 16]
            w.append(((x << 1) | (x >> 31)) & MASK32)

        a, b, c, d, e = h0, h1, h2, h3, h4
        for t in range(0, 20):
            temp = (((a << 5) | (a >> 27)) & MASK32) + (d ^ (b & (c ^ d))) + e + 0x5A827999 + w[t]
            e, d, c, b, a = d, c, ((b << 30) | (b >> 2)) & MASK32, a, temp & MASK32
        for t in range(20, 40):
            temp = (((a << 5) | (a >> 27)) & MASK32) + (b ^ c ^ d) + e + 0x6ED9EBA1 + w[t]
            e, d, c, b, a = d, c, ((b << 30) | (b >> 2)) & MASK32, a, temp & MASK32
        for t in range(40, 60):
            temp = (((a << 5) | (a >> 27)) & MASK32) + ((b & c) | (d & (b | c))) + e + 0x8F1BBCDC + w[t]
            e, d, c, b, a = d, c, ((b << 30) | (b >> 2)) & MASK32, a, temp & MASK32
        for t in range(60, 80):
            temp = (((a << 5) | (a >> 27)) & MASK32) + (b ^ c ^ d) + e + 0xCA62C1D6 + w[t]
            e, d, c, b, a = d, c, ((b << 30) | (b >> 2)) & MASK32, a, temp & MASK32

        h0 = (h0 + a) & MASK32
        h1 = (h1 + b) & MASK32
        h2 = (h2 + c) & MASK32
        h3 = (h3 + d) & MASK32
        h4 = (h4 + e) & MASK32
    return h0, h1, h2, h3, h4


def _sha256_blocks(state: Sequence[int], data: bytes, k: Tuple[int, ...] = K_VALUES) -> State:
    h0, h1, h2, h3, h4, h5, h6, h7 = state
    for offset in range(0, len(data), 64):
        w: List[int] = list(_WORDS32.unpack_from(data, offset))
        for i in range(16, 64):
            x = w[i - 15]
            y = w[i - 2]
            s0 = ((x >> 7) | (x << 25)) ^ ((x >> 18) | (x << 14)) ^ (x >> 3)
            s1 = ((y >> 17) | (y << 15)) ^ ((y >> 19) | (y << 13)) ^ (y >> 10)
            w.append((w[i - 16] + s0 + w[i - 7] + s1) & MASK32)

        a, b, c, d, e, f, g, h = h0, h1, h2, h3, h4, h5, h6, h7
        for i in range(64):
            s1 = (((e >> 6) | (e << 26)) ^ ((e >> 11) | (e << 21)) ^ ((e >> 25) | (e << 7))) & MASK32
            t1 = h + s1 + (g ^ (e & (f ^ g))) + k[i] + w[i]
            s0 = (((a >> 2) | (a << 30)) ^ ((a >> 13) | (a << 19)) ^ ((a >> 22) | (a << 10))) & MASK32
            t2 = s0 + ((a & b) | (c & (a | b)))
            h, g, f, e = g, f, e, (d + t1) & MASK32
            d, c, b, a = c, b, a, (t1 + t2) & MASK32

        h0 = (h0 + a) & MASK32
        h1 = (h1 + b) & MASK32
        h2 = (h2 + c) & MASK32
        h3 = (h3 + d) & MASK32
        h4 = (h4 + e) & MASK32
        h5 = (h5 + f) & MASK32
        h6 = (h6 + g) & MASK32
        h7 = (h7 + h) & MASK32
    return h0, h1, h2, h3, h4, h5, h6, h7


def _sha512_blocks(state: Sequence[int], data: bytes, k: Tuple[int, ...] = K512_VALUES) -> State:
    h0, h1, h2, h3, h4, h5, h6, h7 = state
    for offset in range(0, len(data), 128):
        w: List[int] = list(_WORDS64.unpack_from(data, offset))
        for i in range(16, 80):
            x = w[i - 15]
            y = w[i - 2]
            s0 = ((x >> 1) | (x << 63)) ^ ((x >> 8) | (x << 56)) ^ (x >> 7)
            s1 = ((y >> 19) | (y << 45)) ^ ((y >> 61) | (y << 3)) ^ (y >> 6)
            w.append((w[i - 16] + s0 + w[i - 7] + s1) & MASK64)

        a, b, c, d, e, f, g, h = h0, h1, h2, h3, h4, h5, h6, h7
        for i in range(80):
            s1 = (((e >> 14) | (e << 50)) ^ ((e >> 18) | (e << 46)) ^ ((e >> 41) | (e << 23))) & MASK64
            t1 = h + s1 + (g ^ (e & (f ^ g))) + k[i] + w[i]
            s0 = (((a >> 28) | (a << 36)) ^ ((a >> 34) | (a << 30)) ^ ((a >> 39) | (a << 25))) & MASK64
            t2 = s0 + ((a & b) | (c & (a | b)))
            h, g, f, e = g, f, e, (d + t1) & MASK64
            d, c, b, a = c, b, a, (t1 + t2) & MASK64

        h0 = (h0 + a) & MASK64
        h1 = (h1 + b) & MASK64
        h2 = (h2 + c) & MASK64
        h3 = (h3 + d) & MASK64
        h4 = (h4 + e) & MASK64
        h5 = (h5 + f) & MASK64
        h6 = (h6 + g) & MASK64
        h7 = (h7 + h) & MASK64
    return h0, h1, h2, h3, h4, h5, h6, h7


_UNROLLED = {
    "sha1": _sha1_blocks,
    "sha256": _sha256_blocks,
    "sha512": _sha512_blocks,
}


def _unrolled_process(descriptor: AlgorithmDescriptor, state: State, data: bytes) -> State:
    return _UNROLLED[descriptor.family](state, data)


PORTABLE = TransformStrategy("portable", _portable_process)
UNROLLED = TransformStrategy("unrolled", _unrolled_process)

# Preference order used by "auto", most preferred first.
_REGISTRY: Dict[str, TransformStrategy] = {
    UNROLLED.name: UNROLLED,
    PORTABLE.name: PORTABLE,
}


def register_strategy(strategy: TransformStrategy, preferred: bool = False) -> None:
    """Make `strategy` selectable by name; `preferred` puts it first for "auto"."""
    global _REGISTRY
    if strategy.name == "auto":
        raise ConfigurationError('"auto" is reserved for automatic selection')
    others = {name: s for name, s in _REGISTRY.items() if name != strategy.name}
    if preferred:
        _REGISTRY = {strategy.name: strategy, **others}
    else:
        _REGISTRY = {**others, strategy.name: strategy}


def available_strategies() -> List[str]:
    return [name for name, s in _REGISTRY.items() if s.available()]


def select_strategy(name: Optional[str] = None) -> TransformStrategy:
    """Resolve a strategy by name.

    With no name, the ``SHA_ENGINE_STRATEGY`` environment variable is used,
    defaulting to ``"auto"``, which picks the first available strategy in
    preference order.
    """
    if name is None:
        name = os.environ.get(STRATEGY_ENV, "auto")
    name = name.strip().lower()

    if name == "auto":
        for candidate in _REGISTRY.values():
            if candidate.available():
                log.debug("auto-selected transform strategy %s", candidate.name)
                return candidate
        raise ConfigurationError("No transform strategy is available")

    try:
        strategy = _REGISTRY[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown transform strategy {name!r}, expected one of: auto, "
            f"{', '.join(_REGISTRY)}"
        ) from None
    if not strategy.available():
        raise ConfigurationError(f"Transform strategy {name!r} is not available here")
    return strategy
