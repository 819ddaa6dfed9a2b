import click

import base64
import hmac
import logging

from scryptkdf.errors import InvalidParameter
from scryptkdf.scrypt import calc
from scryptkdf.vectors import self_test

_N = 2**14  # Work factor
_R = 8
_P = 1
_DKLEN = 64


def _cost_options(f):
    """Opciones comunes de coste y sal para derive/verify."""
    f = click.option("--workers", default=1, show_default=True, type=int,
                     help="Procesos para los carriles")(f)
    f = click.option("--p", "p", default=_P, show_default=True, type=int,
                     help="Paralelización")(f)
    f = click.option("--r", "r", default=_R, show_default=True, type=int,
                     help="Tamaño de bloque")(f)
    f = click.option("--n", "n", default=_N, show_default=True, type=int,
                     help="Coste de CPU/memoria (potencia de 2)")(f)
    f = click.option("--salt-hex", default=None, help="Sal en hexadecimal")(f)
    f = click.option("--salt", default=None, help="Sal en texto (UTF-8)")(f)
    return f


def _resolve_salt(salt, salt_hex) -> bytes:
    """Return the salt bytes from exactly one of --salt / --salt-hex."""
    if (salt is None) == (salt_hex is None):
        raise click.UsageError("Indica exactamente una de --salt o --salt-hex.")
    if salt_hex is not None:
        try:
            return bytes.fromhex(salt_hex)
        except ValueError:
            raise click.BadParameter("no es hexadecimal válido", param_hint="--salt-hex")
    return salt.encode()


def _derive_or_exit(password: str, salt: bytes, n, r, p, dklen, workers) -> bytes:
    """Run calc and turn parameter errors into a CLI error."""
    try:
        return calc(password.encode(), salt, n, r, p, dklen, workers=workers)
    except InvalidParameter as e:
        click.secho(f"[ERROR] Parámetro '{e.parameter}' no válido: {e}", fg="red", bold=True)
        raise click.exceptions.Exit(2)


@click.group()
@click.option("--verbose", is_flag=True, help="Muestra trazas de depuración")
def cli(verbose):
    """Derivación de claves scrypt."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@cli.command()
@_cost_options
@click.option("--dklen", default=_DKLEN, show_default=True, type=int,
              help="Longitud de la clave en bytes")
@click.option("--format", "fmt", default="hex", show_default=True,
              type=click.Choice(["hex", "base64"]), help="Codificación de salida")
@click.option(
    "--password",
    prompt="Contraseña",
    hide_input=True,
    help="Contraseña de la que derivar la clave",
)
def derive(salt, salt_hex, n, r, p, workers, dklen, fmt, password):
    """
    Deriva una clave con scrypt y la imprime.
    """
    salt_bytes = _resolve_salt(salt, salt_hex)
    key = _derive_or_exit(password, salt_bytes, n, r, p, dklen, workers)
    if fmt == "base64":
        click.echo(base64.b64encode(key).decode())
    else:
        click.echo(key.hex())


@cli.command()
@_cost_options
@click.option("--expected", required=True, help="Clave esperada en hexadecimal")
@click.option("--password", prompt="Contraseña", hide_input=True)
def verify(salt, salt_hex, n, r, p, workers, expected, password):
    """
    Comprueba que la contraseña produce la clave esperada.
    """
    salt_bytes = _resolve_salt(salt, salt_hex)
    try:
        expected_key = bytes.fromhex(expected)
    except ValueError:
        raise click.BadParameter("no es hexadecimal válido", param_hint="--expected")
    if not expected_key:
        raise click.BadParameter("no puede estar vacía", param_hint="--expected")

    key = _derive_or_exit(password, salt_bytes, n, r, p, len(expected_key), workers)
    if hmac.compare_digest(key, expected_key):
        click.secho("✅ La clave coincide.", fg="green", bold=True)
    else:
        click.secho("La clave no coincide.", fg="yellow")
        raise click.exceptions.Exit(1)


@cli.command()
@click.option("--full", is_flag=True, help="Incluye el vector N=2^20 (1 GiB de memoria)")
def selftest(full):
    """
    Ejecuta los vectores de prueba de RFC 7914.
    """

    def report(name, ok):
        if ok:
            click.secho(f"  ok    {name}", fg="green")
        else:
            click.secho(f"  FALLO {name}", fg="red", bold=True)

    if self_test(full=full, report=report):
        click.secho("✅ Todos los vectores coinciden.", fg="green", bold=True)
    else:
        click.secho("[ERROR] Algún vector no coincide.", fg="red", bold=True)
        raise click.exceptions.Exit(1)


if __name__ == "__main__":
    cli()
