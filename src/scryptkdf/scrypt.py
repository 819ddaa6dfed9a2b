"""
scrypt.py
Función de derivación de claves scrypt (RFC 7914).

    calc(passwd, salt, N, r, p, dklen) -> clave de dklen bytes

PBKDF2-HMAC-SHA256 estira (passwd, salt) en p carriles de 128*r bytes,
cada carril pasa por ROMix y el resultado concatenado se comprime con un
segundo PBKDF2 hasta dklen bytes.
"""

import logging
import sys
from concurrent.futures import ProcessPoolExecutor
from typing import Union

from scryptkdf.crypto import _MAX_OUTPUT, pbkdf2_sha256
from scryptkdf.errors import InvalidCostParameter, InvalidParameter, ParameterTooLarge
from scryptkdf.mix import ro_mix

logger = logging.getLogger(__name__)

# Límite de operandos de la plataforma
_OPERAND_LIMIT = sys.maxsize

BytesLike = Union[bytes, bytearray, memoryview, str]


def _to_bytes(value: BytesLike) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(
            f"expected str or a bytes-like object, got {type(value).__name__}"
        )
    return memoryview(value).tobytes()


def validate_params(n: int, r: int, p: int, dklen: int) -> None:
    """
    Comprueba N, r, p y dklen antes de reservar memoria.
    Lanza InvalidCostParameter, ParameterTooLarge o InvalidParameter.
    """
    if n <= 0 or (n & (n - 1)) != 0:
        raise InvalidCostParameter("N", "N must be > 0 and a power of 2")
    if r < 1:
        raise InvalidCostParameter("r", "r must be >= 1")
    if p < 1:
        raise InvalidCostParameter("p", "p must be >= 1")
    if n > _OPERAND_LIMIT // 128 // r:
        raise ParameterTooLarge("N", "Parameter N is too large")
    if r > _OPERAND_LIMIT // 128 // p:
        raise ParameterTooLarge("r", "Parameter r is too large")
    if p * 128 * r > _MAX_OUTPUT:
        raise ParameterTooLarge("p", "Parameter p is too large")
    if dklen < 0:
        raise InvalidParameter("dklen", "dklen must be >= 0")
    if dklen > _MAX_OUTPUT:
        raise ParameterTooLarge("dklen", "Parameter dklen is too large")


def _lane(args: tuple) -> bytes:
    chunk, n, r = args
    return ro_mix(chunk, n, r)


def calc(
    passwd: BytesLike,
    salt: BytesLike,
    n: int,
    r: int,
    p: int,
    dklen: int,
    workers: int = 1,
) -> bytes:
    """
    Deriva una clave de dklen bytes con scrypt.

    passwd, salt: bytes (o str, que se codifica en UTF-8).
    n: coste de CPU/memoria, potencia de 2.
    r: tamaño de bloque.
    p: paralelización (número de carriles).
    workers: procesos para los carriles; el resultado no depende de este valor.
    """
    validate_params(n, r, p, dklen)
    if workers < 1:
        raise InvalidParameter("workers", "workers must be >= 1")

    passwd = _to_bytes(passwd)
    salt = _to_bytes(salt)
    size = 128 * r

    logger.debug("scrypt N=%d r=%d p=%d dklen=%d workers=%d", n, r, p, dklen, workers)

    b = pbkdf2_sha256(passwd, salt, p * size)
    lanes = [(b[i * size : (i + 1) * size], n, r) for i in range(p)]

    if workers > 1 and p > 1:
        with ProcessPoolExecutor(max_workers=min(workers, p)) as executor:
            # map conserva el orden de los carriles
            mixed = []
            for i, out in enumerate(executor.map(_lane, lanes)):
                mixed.append(out)
                logger.debug("lane %d/%d done", i + 1, p)
    else:
        mixed = []
        for i, lane in enumerate(lanes):
            mixed.append(_lane(lane))
            logger.debug("lane %d/%d done", i + 1, p)

    return pbkdf2_sha256(passwd, b"".join(mixed), dklen)
