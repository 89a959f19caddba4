import json

from gmpy2 import mpz
from typer.testing import CliRunner

from dagvdf.cli import app
from dagvdf.vdf import hash_to_prime

from .conftest import MERSENNE_MODULUS

runner = CliRunner()

MODULUS_HEX = hex(MERSENNE_MODULUS)
if len(MODULUS_HEX) % 2:
    MODULUS_HEX = "0x0" + MODULUS_HEX[2:]

VDF_ARGS = ["--lambda", "128", "--time-bits", "6", "--input", "0x0305", "--modulus", MODULUS_HEX]


def _prove():
    result = runner.invoke(app, ["prove", *VDF_ARGS])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_bound():
    result = runner.invoke(app, ["bound", "--lambda", "128"])
    assert result.exit_code == 0, result.output
    out = json.loads(result.stdout)
    assert out["lambda"] == 128
    assert out["boundBits"] == 103
    assert out["maxIntBits"] == 101


def test_prove_prints_solution():
    out = _prove()
    assert out["iterations"] == 64
    assert out["cancelled"] is False
    assert out["sol1"].startswith("0x") and out["sol2"].startswith("0x")


def test_verify_with_fields():
    out = _prove()
    ok = runner.invoke(app, ["verify", *VDF_ARGS, "--proof", out["sol1"], "--output", out["sol2"]])
    assert ok.exit_code == 0, ok.output
    report = json.loads(ok.stdout)
    assert report["ok"] is True and report["reason"] == "ok"

    bad = runner.invoke(app, ["verify", *VDF_ARGS, "--proof", out["sol1"], "--output", "0x01", "-q"])
    assert bad.exit_code == 1
    assert bad.stdout == ""


def test_verify_with_solution_file(tmp_path):
    path = tmp_path / "sol.json"
    path.write_text(json.dumps(_prove()), encoding="utf-8")
    result = runner.invoke(app, ["verify", *VDF_ARGS, "--solution", str(path)])
    assert result.exit_code == 0, result.output


def test_verify_from_stdin():
    result = runner.invoke(app, ["verify", *VDF_ARGS, "-s", "-"], input=json.dumps(_prove()))
    assert result.exit_code == 0, result.output


def test_verify_needs_a_solution():
    result = runner.invoke(app, ["verify", *VDF_ARGS, "--proof", "0x01"])
    assert result.exit_code == 2


def test_bad_hex_and_zero_modulus_are_usage_errors():
    assert runner.invoke(app, ["prove", "-t", "2", "-i", "0x2", "-m", "0x0101"]).exit_code == 2
    assert runner.invoke(app, ["prove", "-t", "2", "-i", "0x02", "-m", "0x00"]).exit_code == 2


def test_prove_timeout_cancels():
    result = runner.invoke(
        app,
        ["prove", "--lambda", "128", "-t", "40", "-i", "0x03", "-m", MODULUS_HEX, "--timeout", "0.05"],
    )
    assert result.exit_code == 2
    out = json.loads(result.stdout)
    assert out["cancelled"] is True
    assert out["sol1"] == "0x" and out["sol2"] == "0x"


def test_prove_reports_prime_search_failure(monkeypatch):
    # bound 8 leaves only 6*0 ± 1 as candidates, so the search always runs dry
    monkeypatch.setattr(hash_to_prime, "_DEFAULT_CACHE", hash_to_prime.PrecisionBoundCache(lambda _l: mpz(8)))
    result = runner.invoke(app, ["prove", *VDF_ARGS])
    assert result.exit_code == 3
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "PrimeSearchExhausted" in result.output
    assert '"sol1"' not in result.output
