"""
salsa.py
Núcleo Salsa20/8 usado por BlockMix como función de mezcla.

Referencias:
    https://tools.ietf.org/html/rfc7914#section-3
    http://cr.yp.to/salsa20.html
"""

import struct

_MASK32 = 0xFFFFFFFF
_BLOCK = struct.Struct("<16I")


def rotl32(value: int, shift: int) -> int:
    """Rotación a la izquierda sobre un entero sin signo de 32 bits."""
    value &= _MASK32
    return ((value << shift) | (value >> (32 - shift))) & _MASK32


def salsa20_8(block: bytes) -> bytes:
    """
    Aplica Salsa20/8 a un bloque de 64 bytes y devuelve otros 64 bytes.

    El bloque se interpreta como 16 palabras little-endian de 32 bits.
    Son 4 dobles rondas (columnas y luego filas) y al final se suma la
    entrada palabra a palabra módulo 2^32.
    """
    if len(block) != 64:
        raise ValueError(f"Salsa20/8 requires a 64-byte block, got {len(block)}")

    b32 = _BLOCK.unpack(block)
    x = list(b32)

    for _ in range(4):
        # columnas
        x[4] ^= rotl32(x[0] + x[12], 7)
        x[8] ^= rotl32(x[4] + x[0], 9)
        x[12] ^= rotl32(x[8] + x[4], 13)
        x[0] ^= rotl32(x[12] + x[8], 18)
        x[9] ^= rotl32(x[5] + x[1], 7)
        x[13] ^= rotl32(x[9] + x[5], 9)
        x[1] ^= rotl32(x[13] + x[9], 13)
        x[5] ^= rotl32(x[1] + x[13], 18)
        x[14] ^= rotl32(x[10] + x[6], 7)
        x[2] ^= rotl32(x[14] + x[10], 9)
        x[6] ^= rotl32(x[2] + x[14], 13)
        x[10] ^= rotl32(x[6] + x[2], 18)
        x[3] ^= rotl32(x[15] + x[11], 7)
        x[7] ^= rotl32(x[3] + x[15], 9)
        x[11] ^= rotl32(x[7] + x[3], 13)
        x[15] ^= rotl32(x[11] + x[7], 18)
        # filas
        x[1] ^= rotl32(x[0] + x[3], 7)
        x[2] ^= rotl32(x[1] + x[0], 9)
        x[3] ^= rotl32(x[2] + x[1], 13)
        x[0] ^= rotl32(x[3] + x[2], 18)
        x[6] ^= rotl32(x[5] + x[4], 7)
        x[7] ^= rotl32(x[6] + x[5], 9)
        x[4] ^= rotl32(x[7] + x[6], 13)
        x[5] ^= rotl32(x[4] + x[7], 18)
        x[11] ^= rotl32(x[10] + x[9], 7)
        x[8] ^= rotl32(x[11] + x[10], 9)
        x[9] ^= rotl32(x[8] + x[11], 13)
        x[10] ^= rotl32(x[9] + x[8], 18)
        x[12] ^= rotl32(x[15] + x[14], 7)
        x[13] ^= rotl32(x[12] + x[15], 9)
        x[14] ^= rotl32(x[13] + x[12], 13)
        x[15] ^= rotl32(x[14] + x[13], 18)

    return _BLOCK.pack(*((a + b) & _MASK32 for a, b in zip(b32, x)))
