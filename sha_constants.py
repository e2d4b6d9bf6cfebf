"""Constant tables and algorithm descriptors for SHA-1 and SHA-2.

Every variant is described by one immutable `AlgorithmDescriptor`. SHA-224
and SHA-384 reuse the SHA-256 / SHA-512 round constants and compression
function; they differ only in the initial vector and the digest size.

All values are taken from FIPS 180-4.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple, Union

from errors import UnknownAlgorithmError


MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

# SHA-1 uses one constant per 20-round group.
SHA1_K_VALUES: Tuple[int, ...] = (
    0x5A827999,
    0x6ED9EBA1,
    0x8F1BBCDC,
    0xCA62C1D6,
)

# Standard SHA-256 round constants k[0..63] from FIPS 180-4.
K_VALUES: Tuple[int, ...] = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5,
    0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3,
    0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC,
    0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7,
    0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13,
    0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3,
    0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5,
    0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208,
    0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
)

# SHA-512 round constants k[0..79]; the high halves of the first 64 words
# are the SHA-256 constants.
K512_VALUES: Tuple[int, ...] = (
    0x428A2F98D728AE22, 0x7137449123EF65CD, 0xB5C0FBCFEC4D3B2F, 0xE9B5DBA58189DBBC,
    0x3956C25BF348B538, 0x59F111F1B605D019, 0x923F82A4AF194F9B, 0xAB1C5ED5DA6D8118,
    0xD807AA98A3030242, 0x12835B0145706FBE, 0x243185BE4EE4B28C, 0x550C7DC3D5FFB4E2,
    0x72BE5D74F27B896F, 0x80DEB1FE3B1696B1, 0x9BDC06A725C71235, 0xC19BF174CF692694,
    0xE49B69C19EF14AD2, 0xEFBE4786384F25E3, 0x0FC19DC68B8CD5B5, 0x240CA1CC77AC9C65,
    0x2DE92C6F592B0275, 0x4A7484AA6EA6E483, 0x5CB0A9DCBD41FBD4, 0x76F988DA831153B5,
    0x983E5152EE66DFAB, 0xA831C66D2DB43210, 0xB00327C898FB213F, 0xBF597FC7BEEF0EE4,
    0xC6E00BF33DA88FC2, 0xD5A79147930AA725, 0x06CA6351E003826F, 0x142929670A0E6E70,
    0x27B70A8546D22FFC, 0x2E1B21385C26C926, 0x4D2C6DFC5AC42AED, 0x53380D139D95B3DF,
    0x650A73548BAF63DE, 0x766A0ABB3C77B2A8, 0x81C2C92E47EDAEE6, 0x92722C851482353B,
    0xA2BFE8A14CF10364, 0xA81A664BBC423001, 0xC24B8B70D0F89791, 0xC76C51A30654BE30,
    0xD192E819D6EF5218, 0xD69906245565A910, 0xF40E35855771202A, 0x106AA07032BBD1B8,
    0x19A4C116B8D2D0C8, 0x1E376C085141AB53, 0x2748774CDF8EEB99, 0x34B0BCB5E19B48A8,
    0x391C0CB3C5C95A63, 0x4ED8AA4AE3418ACB, 0x5B9CCA4F7763E373, 0x682E6FF3D6B2B8A3,
    0x748F82EE5DEFB2FC, 0x78A5636F43172F60, 0x84C87814A1F0AB72, 0x8CC702081A6439EC,
    0x90BEFFFA23631E28, 0xA4506CEBDE82BDE9, 0xBEF9A3F7B2C67915, 0xC67178F2E372532B,
    0xCA273ECEEA26619C, 0xD186B8C721C0C207, 0xEADA7DD6CDE0EB1E, 0xF57D4F7FEE6ED178,
    0x06F067AA72176FBA, 0x0A637DC5A2C898A6, 0x113F9804BEF90DAE, 0x1B710B35131C471B,
    0x28DB77F523047D84, 0x32CAAB7B40C72493, 0x3C9EBE0A15C9BEBC, 0x431D67C49C100D4C,
    0x4CC5D4BECB3E42B6, 0x597F299CFC657E2A, 0x5FCB6FAB3AD6FAEC, 0x6C44198C4A475817,
)


SHA1_H0: Tuple[int, ...] = (
    0x67452301,
    0xEFCDAB89,
    0x98BADCFE,
    0x10325476,
    0xC3D2E1F0,
)

# Initial hash values (first 32 bits of the fractional parts of the
# square roots of the first 8 primes 2..19), as per FIPS 180-4.
SHA256_H0: Tuple[int, ...] = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

# Second 32 bits of the fractional parts of the square roots of the
# 9th through 16th primes.
SHA224_H0: Tuple[int, ...] = (
    0xC1059ED8,
    0x367CD507,
    0x3070DD17,
    0xF70E5939,
    0xFFC00B31,
    0x68581511,
    0x64F98FA7,
    0xBEFA4FA4,
)

SHA512_H0: Tuple[int, ...] = (
    0x6A09E667F3BCC908,
    0xBB67AE8584CAA73B,
    0x3C6EF372FE94F82B,
    0xA54FF53A5F1D36F1,
    0x510E527FADE682D1,
    0x9B05688C2B3E6C1F,
    0x1F83D9ABFB41BD6B,
    0x5BE0CD19137E2179,
)

SHA384_H0: Tuple[int, ...] = (
    0xCBBB9D5DC1059ED8,
    0x629A292A367CD507,
    0x9159015A3070DD17,
    0x152FECD8F70E5939,
    0x67332667FFC00B31,
    0x8EB44A8768581511,
    0xDB0C2E0D64F98FA7,
    0x47B5481DBEFA4FA4,
)


@dataclass(frozen=True)
class AlgorithmDescriptor:
    """Fixed parameters of one digest variant."""

    name: str
    family: str
    word_bits: int
    block_size: int
    digest_size: int
    state_words: int
    initial_state: Tuple[int, ...]
    round_constants: Tuple[int, ...]
    rounds: int
    length_field_size: int

    @property
    def word_bytes(self) -> int:
        return self.word_bits // 8

    @property
    def word_mask(self) -> int:
        return (1 << self.word_bits) - 1

    @property
    def max_bit_length(self) -> int:
        """Largest message length, in bits, the length field can encode."""
        return (1 << (8 * self.length_field_size)) - 1


SHA1 = AlgorithmDescriptor(
    name="SHA-1",
    family="sha1",
    word_bits=32,
    block_size=64,
    digest_size=20,
    state_words=5,
    initial_state=SHA1_H0,
    round_constants=SHA1_K_VALUES,
    rounds=80,
    length_field_size=8,
)

SHA224 = AlgorithmDescriptor(
    name="SHA-224",
    family="sha256",
    word_bits=32,
    block_size=64,
    digest_size=28,
    state_words=8,
    initial_state=SHA224_H0,
    round_constants=K_VALUES,
    rounds=64,
    length_field_size=8,
)

SHA256 = AlgorithmDescriptor(
    name="SHA-256",
    family="sha256",
    word_bits=32,
    block_size=64,
    digest_size=32,
    state_words=8,
    initial_state=SHA256_H0,
    round_constants=K_VALUES,
    rounds=64,
    length_field_size=8,
)

SHA384 = AlgorithmDescriptor(
    name="SHA-384",
    family="sha512",
    word_bits=64,
    block_size=128,
    digest_size=48,
    state_words=8,
    initial_state=SHA384_H0,
    round_constants=K512_VALUES,
    rounds=80,
    length_field_size=16,
)

SHA512 = AlgorithmDescriptor(
    name="SHA-512",
    family="sha512",
    word_bits=64,
    block_size=128,
    digest_size=64,
    state_words=8,
    initial_state=SHA512_H0,
    round_constants=K512_VALUES,
    rounds=80,
    length_field_size=16,
)


def _normalize(name: str) -> str:
    return name.lower().replace("-", "").replace("_", "")


DESCRIPTORS: Dict[str, AlgorithmDescriptor] = {
    _normalize(d.name): d for d in (SHA1, SHA224, SHA256, SHA384, SHA512)
}


def get_descriptor(variant: Union[str, AlgorithmDescriptor]) -> AlgorithmDescriptor:
    """Resolve `variant` to its descriptor.

    Accepts a descriptor (returned as is) or a name such as ``"SHA-256"``,
    ``"sha256"`` or ``"SHA_256"``.
    """
    if isinstance(variant, AlgorithmDescriptor):
        return variant
    try:
        return DESCRIPTORS[_normalize(variant)]
    except (KeyError, AttributeError):
        raise UnknownAlgorithmError(
            f"Unknown digest algorithm {variant!r}, expected one of "
            f"{', '.join(d.name for d in DESCRIPTORS.values())}"
        ) from None
