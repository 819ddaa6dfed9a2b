import logging
import os
import sys

import pytest

import scryptkdf.scrypt
from scryptkdf.errors import InvalidCostParameter, InvalidParameter, ParameterTooLarge
from scryptkdf.scrypt import calc, validate_params
from scryptkdf.vectors import SCRYPT

_SLOW = os.environ.get("SCRYPTKDF_SLOW") == "1"


def _vector_id(v):
    return f"N={v[2]}-r={v[3]}-p={v[4]}"


@pytest.mark.parametrize(
    "vector", [v for v in SCRYPT if v[2] <= 16384], ids=_vector_id
)
def test_reference_vectors(vector):
    passwd, salt, n, r, p, dklen, expected = vector
    assert calc(passwd, salt, n, r, p, dklen) == expected


@pytest.mark.slow
@pytest.mark.skipif(not _SLOW, reason="necesita 1 GiB y mucho tiempo; SCRYPTKDF_SLOW=1")
def test_reference_vector_one_gib():
    passwd, salt, n, r, p, dklen, expected = SCRYPT[-1]
    assert n == 1048576
    assert calc(passwd, salt, n, r, p, dklen) == expected


def test_str_inputs_are_utf8():
    assert calc("pässword", "sal", 16, 1, 1, 32) == calc(
        "pässword".encode(), b"sal", 16, 1, 1, 32
    )


@pytest.mark.parametrize("dklen", [0, 1, 31, 32, 33, 100])
def test_output_length(dklen):
    out = calc(b"pw", b"salt", 16, 1, 1, dklen)
    assert len(out) == dklen


def test_shorter_key_is_prefix():
    # PBKDF2 con una iteración: la clave corta es prefijo de la larga
    assert calc(b"pw", b"s", 16, 1, 2, 64)[:20] == calc(b"pw", b"s", 16, 1, 2, 20)


@pytest.mark.parametrize("n", [0, 3, 6, 12, 1000, -8])
def test_invalid_n(n):
    with pytest.raises(InvalidCostParameter) as exc:
        calc(b"pw", b"salt", n, 1, 1, 16)
    assert exc.value.parameter == "N"


@pytest.mark.parametrize("r,p,name", [(0, 1, "r"), (1, 0, "p"), (-1, 1, "r")])
def test_invalid_r_p(r, p, name):
    with pytest.raises(InvalidCostParameter) as exc:
        calc(b"pw", b"salt", 16, r, p, 16)
    assert exc.value.parameter == name


def test_n_too_large():
    with pytest.raises(ParameterTooLarge) as exc:
        validate_params(1 << 62, 8, 1, 64)
    assert exc.value.parameter == "N"


def test_r_too_large():
    with pytest.raises(ParameterTooLarge) as exc:
        validate_params(1, 1 << 40, 1 << 20, 64)
    assert exc.value.parameter == "r"


def test_limits_follow_operand_limit(monkeypatch):
    monkeypatch.setattr(scryptkdf.scrypt, "_OPERAND_LIMIT", 128 * 16)
    validate_params(16, 1, 1, 16)
    with pytest.raises(ParameterTooLarge):
        validate_params(32, 1, 1, 16)
    with pytest.raises(ParameterTooLarge):
        validate_params(1, 16, 2, 16)


def test_dklen_bounds():
    with pytest.raises(InvalidParameter) as exc:
        validate_params(16, 1, 1, -1)
    assert exc.value.parameter == "dklen"
    with pytest.raises(ParameterTooLarge):
        validate_params(16, 1, 1, (2**32 - 1) * 32 + 1)


def test_errors_are_value_errors():
    assert issubclass(InvalidCostParameter, ValueError)
    assert issubclass(ParameterTooLarge, ValueError)


def test_validation_happens_before_any_work(monkeypatch):
    calls = []
    monkeypatch.setattr(
        scryptkdf.scrypt, "pbkdf2_sha256", lambda *a: calls.append(a) or b""
    )
    with pytest.raises(InvalidCostParameter):
        calc(b"pw", b"salt", 3, 1, 1, 16)
    with pytest.raises(ParameterTooLarge):
        calc(b"pw", b"salt", 1 << 62, 8, 1, 16)
    assert calls == []


def test_lanes_are_concatenated_in_order(monkeypatch):
    seen = []

    def fake_ro_mix(b, n, r):
        seen.append(bytes(b))
        return bytes(b)

    monkeypatch.setattr(scryptkdf.scrypt, "ro_mix", fake_ro_mix)
    out = calc(b"pw", b"salt", 16, 1, 3, 16)
    assert len(seen) == 3
    # Con ROMix identidad, S es el propio B
    from scryptkdf.crypto import pbkdf2_sha256

    b = pbkdf2_sha256(b"pw", b"salt", 3 * 128)
    assert b"".join(seen) == b
    assert out == pbkdf2_sha256(b"pw", b, 16)


def test_workers_give_same_result():
    single = calc(b"pw", b"salt", 16, 1, 4, 32)
    assert calc(b"pw", b"salt", 16, 1, 4, 32, workers=2) == single


def test_invalid_workers():
    with pytest.raises(InvalidParameter) as exc:
        calc(b"pw", b"salt", 16, 1, 1, 32, workers=0)
    assert exc.value.parameter == "workers"


def test_operand_limit_is_platform_maxsize():
    assert scryptkdf.scrypt._OPERAND_LIMIT == sys.maxsize


@pytest.mark.parametrize("bad", [4, None, 3.5, [1, 2]])
def test_rejects_non_bytes_inputs(bad):
    # Un int no debe convertirse en N bytes a cero
    with pytest.raises(TypeError):
        calc(bad, b"salt", 16, 1, 1, 16)
    with pytest.raises(TypeError):
        calc(b"pw", bad, 16, 1, 1, 16)


def test_accepts_bytes_like_inputs():
    expected = calc(b"pw", b"salt", 16, 1, 1, 16)
    assert calc(bytearray(b"pw"), memoryview(b"salt"), 16, 1, 1, 16) == expected


def test_p_too_large_for_pbkdf2():
    # p*128*r no puede pasar de (2^32 - 1) * 32 bytes
    with pytest.raises(ParameterTooLarge) as exc:
        validate_params(1, 1, 2**31, 64)
    assert exc.value.parameter == "p"
    validate_params(1, 1, 2**28, 64)


@pytest.mark.parametrize("workers", [1, 2])
def test_lane_progress_is_logged(caplog, workers):
    caplog.set_level(logging.DEBUG, logger="scryptkdf.scrypt")
    calc(b"pw", b"salt", 16, 1, 3, 16, workers=workers)
    done = [rec.getMessage() for rec in caplog.records if "done" in rec.getMessage()]
    assert done == ["lane 1/3 done", "lane 2/3 done", "lane 3/3 done"]
