"""
benchmark.py
Script de benchmark para medir el tiempo de derivación de scrypt.
"""

import os
import time
import argparse

from scryptkdf.scrypt import calc


def benchmark_calc(n: int, r: int, p: int, iterations: int = 3, workers: int = 1):
    """
    Mide el tiempo medio de calc() con una sal aleatoria y parámetros dados.
    """
    salt = os.urandom(16)
    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        calc(b"benchmark", salt, n, r, p, 64, workers=workers)
        times.append(time.perf_counter() - start)
    avg = sum(times) / len(times)
    mem_kib = n * 128 * r // 1024
    print(
        f"N={n} r={r} p={p} workers={workers}: {avg:.4f}s de media "
        f"en {iterations} ejecuciones (tabla {mem_kib} KiB por carril)"
    )
    return avg


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Benchmark de scrypt en Python puro.")
    parser.add_argument("--n", type=int, default=1024, help="Coste de CPU/memoria")
    parser.add_argument("--r", type=int, default=8, help="Tamaño de bloque")
    parser.add_argument("--p", type=int, default=1, help="Paralelización")
    parser.add_argument("--workers", type=int, default=1, help="Procesos para los carriles")
    parser.add_argument("--iter", type=int, default=3, help="Número de iteraciones")
    args = parser.parse_args()
    benchmark_calc(args.n, args.r, args.p, args.iter, args.workers)
