"""Portable SHA-1 / SHA-2 compression functions.

Each family exposes the same layers:

* a single round (`sha1_round`, `compression`, `compression512`),
* the full round loop over a message schedule (`sha1_compress80`,
  `compress64`, `compress80`),
* the schedule builder for one block,
* a `*_transform(state, block) -> state` function that unpacks the block,
  runs the rounds and adds the working registers back into the state.

For SHA-256, one round computes:

    S1   = (e >>> 6) ^ (e >>> 11) ^ (e >>> 25)
    ch   = (e & f) ^ (~e & g)
    temp1 = h + S1 + ch + k + w

    S0   = (a >>> 2) ^ (a >>> 13) ^ (a >>> 22)
    maj  = (a & b) ^ (a & c) ^ (b & c)
    temp2 = S0 + maj

    a' = temp1 + temp2
    e' = d + temp1

and shifts the remaining registers down by one. SHA-512 is the same round
over 64-bit words with rotation counts (28, 34, 39) and (14, 18, 41).

All additions are performed modulo 2**32 or 2**64; wrap-around is part of
the algorithm. None of these functions keep any state of their own.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple, Union

from sha_constants import (
    K512_VALUES,
    K_VALUES,
    MASK32,
    MASK64,
    SHA1_K_VALUES,
    AlgorithmDescriptor,
    get_descriptor,
)


State = Tuple[int, ...]


def _rotr(x: int, n: int) -> int:
    """Right-rotate a 32-bit word `x` by `n` bits."""
    x &= MASK32
    return ((x >> n) | (x << (32 - n))) & MASK32


def _rotl(x: int, n: int) -> int:
    """Left-rotate a 32-bit word `x` by `n` bits."""
    x &= MASK32
    return ((x << n) | (x >> (32 - n))) & MASK32


def _rotr64(x: int, n: int) -> int:
    """Right-rotate a 64-bit word `x` by `n` bits."""
    x &= MASK64
    return ((x >> n) | (x << (64 - n))) & MASK64


def _unpack_words(block: bytes, word_bytes: int) -> List[int]:
    """Split `block` into big-endian words of `word_bytes` bytes."""
    return [
        int.from_bytes(block[i : i + word_bytes], byteorder="big")
        for i in range(0, len(block), word_bytes)
    ]


def add_states(state: Sequence[int], working: Sequence[int], mask: int) -> State:
    """Feed-forward: H_{i+1}[j] = (H_i[j] + working[j]) mod 2^wordwidth."""
    return tuple((h + x) & mask for h, x in zip(state, working))


#
# SHA-1
#

def _sha1_f(t: int, b: int, c: int, d: int) -> int:
    """Round function for round `t`: ch, parity, maj, parity."""
    if t < 20:
        return d ^ (b & (c ^ d))
    if t < 40 or t >= 60:
        return b ^ c ^ d
    return (b & c) | (d & (b | c))


def sha1_round(
    a: int, b: int, c: int, d: int, e: int, w: int, t: int
) -> Tuple[int, int, int, int, int]:
    """Perform SHA-1 round `t` (0..79) with schedule word `w`."""
    temp = (_rotl(a, 5) + _sha1_f(t, b, c, d) + e + SHA1_K_VALUES[t // 20] + w) & MASK32
    return temp, a, _rotl(b, 30), c, d


def build_sha1_schedule(block: bytes) -> List[int]:
    """Given a 64-byte block, build the 80-word SHA-1 schedule."""
    if len(block) != 64:
        raise ValueError(f"Expected 64-byte block, got {len(block)}")

    w = _unpack_words(block, 4) + [0] * 64
    for t in range(16, 80):
        w[t] = _rotl(w[t - 3] ^ w[t - 8] ^ w[t - 14] ^ w[t - 16], 1)
    return w


def sha1_compress80(
    a: int, b: int, c: int, d: int, e: int, ws: Sequence[int]
) -> Tuple[int, int, int, int, int]:
    """Run the 80 SHA-1 rounds for one block and return the working registers."""
    if len(ws) != 80:
        raise ValueError(f"sha1_compress80 expects 80 message schedule words, got {len(ws)}")

    for t in range(80):
        a, b, c, d, e = sha1_round(a, b, c, d, e, ws[t], t)
    return a, b, c, d, e


def sha1_transform(state: Sequence[int], block: bytes) -> State:
    """Apply the SHA-1 compression function to one 64-byte block."""
    ws = build_sha1_schedule(block)
    return add_states(state, sha1_compress80(*state, ws), MASK32)


#
# SHA-256 / SHA-224
#

def _small_sigma0(x: int) -> int:
    """SHA-256 function σ0 used in the message schedule."""
    return _rotr(x, 7) ^ _rotr(x, 18) ^ (x >> 3)


def _small_sigma1(x: int) -> int:
    """SHA-256 function σ1 used in the message schedule."""
    return _rotr(x, 17) ^ _rotr(x, 19) ^ (x >> 10)


def compression(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    w: int,
    k: int,
) -> Tuple[int, int, int, int, int, int, int, int]:
    """Perform one SHA-256 compression round.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        32-bit words representing the current working state.
    w : int
        Message schedule word `w[i]`.
    k : int
        Round constant `k[i]`.

    Returns
    -------
    (a_new, b_new, c_new, d_new, e_new, f_new, g_new, h_new) : tuple[int, ...]
        Updated working state after one compression round, all reduced modulo 2**32.
    """
    S1 = _rotr(e, 6) ^ _rotr(e, 11) ^ _rotr(e, 25)
    # same as (e & f) ^ (~e & g)
    ch = g ^ (e & (f ^ g))
    temp1 = (h + S1 + ch + k + w) & MASK32

    S0 = _rotr(a, 2) ^ _rotr(a, 13) ^ _rotr(a, 22)
    maj = (a & b) ^ (a & c) ^ (b & c)
    temp2 = (S0 + maj) & MASK32

    return (temp1 + temp2) & MASK32, a, b, c, (d + temp1) & MASK32, e, f, g


def build_sha256_schedule(block: bytes) -> List[int]:
    """Given a 512-bit block, build the 64-word message schedule w[0..63]."""
    if len(block) != 64:
        raise ValueError(f"Expected 64-byte block, got {len(block)}")

    w: List[int] = _unpack_words(block, 4) + [0] * 48

    # Extend to 64 words using the SHA-256 recurrence.
    for i in range(16, 64):
        w[i] = (_small_sigma1(w[i - 2]) + w[i - 7] + _small_sigma0(w[i - 15]) + w[i - 16]) & MASK32

    return w


def compress64(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    ws: Sequence[int],
) -> Tuple[int, int, int, int, int, int, int, int]:
    """Run the full 64-round SHA-256 compression loop for one block.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        Initial working state words (typically the current hash value).
    ws : Sequence[int]
        The 64-word message schedule `w[0..63]` for this block.

    Returns
    -------
    (a, b, c, d, e, f, g, h) : tuple[int, ...]
        Final working state words after 64 rounds.
    """
    if len(ws) != 64:
        raise ValueError(f"compress64 expects 64 message schedule words, got {len(ws)}")

    for i in range(64):
        a, b, c, d, e, f, g, h = compression(a, b, c, d, e, f, g, h, ws[i], K_VALUES[i])

    return a, b, c, d, e, f, g, h


def sha256_transform(state: Sequence[int], block: bytes) -> State:
    """Apply the SHA-256 compression function to one 64-byte block.

    SHA-224 runs exactly this function; only its initial state differs.
    """
    ws = build_sha256_schedule(block)
    return add_states(state, compress64(*state, ws), MASK32)


#
# SHA-512 / SHA-384
#

def _small_sigma0_512(x: int) -> int:
    return _rotr64(x, 1) ^ _rotr64(x, 8) ^ (x >> 7)


def _small_sigma1_512(x: int) -> int:
    return _rotr64(x, 19) ^ _rotr64(x, 61) ^ (x >> 6)


def compression512(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    w: int,
    k: int,
) -> Tuple[int, int, int, int, int, int, int, int]:
    """Perform one SHA-512 compression round over 64-bit words."""
    S1 = _rotr64(e, 14) ^ _rotr64(e, 18) ^ _rotr64(e, 41)
    ch = g ^ (e & (f ^ g))
    temp1 = (h + S1 + ch + k + w) & MASK64

    S0 = _rotr64(a, 28) ^ _rotr64(a, 34) ^ _rotr64(a, 39)
    maj = (a & b) ^ (a & c) ^ (b & c)
    temp2 = (S0 + maj) & MASK64

    return (temp1 + temp2) & MASK64, a, b, c, (d + temp1) & MASK64, e, f, g


def build_sha512_schedule(block: bytes) -> List[int]:
    """Given a 1024-bit block, build the 80-word message schedule w[0..79]."""
    if len(block) != 128:
        raise ValueError(f"Expected 128-byte block, got {len(block)}")

    w: List[int] = _unpack_words(block, 8) + [0] * 64
    for i in range(16, 80):
        w[i] = (
            _small_sigma1_512(w[i - 2]) + w[i - 7] + _small_sigma0_512(w[i - 15]) + w[i - 16]
        ) & MASK64

    return w


def compress80(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    ws: Sequence[int],
) -> Tuple[int, int, int, int, int, int, int, int]:
    """Run the 80-round SHA-512 compression loop for one block."""
    if len(ws) != 80:
        raise ValueError(f"compress80 expects 80 message schedule words, got {len(ws)}")

    for i in range(80):
        a, b, c, d, e, f, g, h = compression512(a, b, c, d, e, f, g, h, ws[i], K512_VALUES[i])

    return a, b, c, d, e, f, g, h


def sha512_transform(state: Sequence[int], block: bytes) -> State:
    """Apply the SHA-512 compression function to one 128-byte block.

    SHA-384 runs exactly this function; only its initial state differs.
    """
    ws = build_sha512_schedule(block)
    return add_states(state, compress80(*state, ws), MASK64)


TRANSFORMS = {
    "sha1": sha1_transform,
    "sha256": sha256_transform,
    "sha512": sha512_transform,
}


def init_state(variant: Union[str, AlgorithmDescriptor]) -> State:
    """Return the initial state vector of `variant`."""
    return tuple(get_descriptor(variant).initial_state)


def transform(
    variant: Union[str, AlgorithmDescriptor], state: Sequence[int], block: bytes
) -> State:
    """Compress one full block into `state` using the family of `variant`.

    `state` may be any caller-provided chaining value, not only the initial
    vector, so that other constructions can drive the raw transform.
    """
    descriptor = get_descriptor(variant)
    if len(block) != descriptor.block_size:
        raise ValueError(
            f"{descriptor.name} transform expects a {descriptor.block_size}-byte block, "
            f"got {len(block)}"
        )
    if len(state) != descriptor.state_words:
        raise ValueError(
            f"{descriptor.name} state must have {descriptor.state_words} words, got {len(state)}"
        )
    return TRANSFORMS[descriptor.family](state, bytes(block))
