"""
mix.py
BlockMix, Integerify y ROMix (RFC 7914, secciones 4 y 5).
"""

from scryptkdf.salsa import salsa20_8

_BLOCK_SIZE = 64


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """XOR byte a byte de dos buffers de la misma longitud."""
    if len(a) != len(b):
        raise ValueError(f"Cannot xor buffers of length {len(a)} and {len(b)}")
    n = int.from_bytes(a, "little") ^ int.from_bytes(b, "little")
    return n.to_bytes(len(a), "little")


def block_mix(b: bytes, r: int) -> bytes:
    """
    scryptBlockMix sobre 2*r bloques de 64 bytes.
    Devuelve primero las salidas de índice par y luego las impares.
    """
    if len(b) != 128 * r:
        raise ValueError(f"BlockMix expects {128 * r} bytes, got {len(b)}")

    x = b[-_BLOCK_SIZE:]
    even = []
    odd = []
    for i in range(2 * r):
        chunk = b[i * _BLOCK_SIZE : (i + 1) * _BLOCK_SIZE]
        x = salsa20_8(xor_bytes(x, chunk))
        if i % 2 == 0:
            even.append(x)
        else:
            odd.append(x)
    return b"".join(even) + b"".join(odd)


def integerify(b: bytes) -> int:
    """Primeros 4 bytes del último bloque de 64, como entero little-endian."""
    last = b[-_BLOCK_SIZE:]
    return int.from_bytes(last[:4], "little")


def ro_mix(b: bytes, n: int, r: int) -> bytes:
    """
    scryptROMix: llena una tabla de N iteraciones de BlockMix y luego
    hace N rondas más leyendo bloques de la tabla según integerify(B).
    """
    size = 128 * r
    if len(b) != size:
        raise ValueError(f"ROMix expects {size} bytes, got {len(b)}")

    # Tabla V: N bloques contiguos de 128*r bytes
    v = bytearray(n * size)
    for i in range(n):
        v[i * size : (i + 1) * size] = b
        b = block_mix(b, r)

    for _ in range(n):
        j = integerify(b) % n
        b = block_mix(xor_bytes(b, v[j * size : (j + 1) * size]), r)

    return b
