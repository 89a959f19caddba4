"""
dagvdf.cli
----------

Local command line for the Wesolowski VDF.

Commands:
  - bound   : Show the hash-to-prime precision bound for a lambda.
  - prove   : Run the prover and print the solution as JSON (exit 2 if
              cancelled, 3 if the challenge prime could not be derived).
  - verify  : Verify a solution (hex fields or a JSON file); exit 0/1.

All byte inputs are 0x-hex (big-endian). Solutions use the ``sol1`` (proof)
and ``sol2`` (output) keys.

Example:
  dagvdf prove --lambda 128 --time-bits 10 --input 0x02 --modulus 0x0101
  dagvdf prove ... > sol.json && dagvdf verify ... --solution sol.json
"""

from __future__ import annotations

import json
import sys
import threading
import time
from typing import Any, Dict, Optional, Sequence

import typer

from ..constants import DEFAULT_LAMBDA_BOUND
from ..errors import VdfError
from ..utils.bytes import from_hex
from ..vdf import CancellationToken, Solution, WesolowskiProver, WesolowskiVdf, WesolowskiVerifier
from ..vdf.hash_to_prime import HashToPrime

__all__ = ["app", "main"]

app = typer.Typer(
    name="dagvdf",
    help="Wesolowski VDF prover/verifier (RSW puzzle, hash-to-prime challenge).",
    no_args_is_help=True,
    add_completion=False,
)


def _hex_arg(value: str, name: str) -> bytes:
    try:
        return from_hex(value)
    except ValueError as e:
        raise typer.BadParameter(f"{name}: {e}")


def _opt_lambda() -> int:
    return typer.Option(DEFAULT_LAMBDA_BOUND, "--lambda", "-l", min=0, help="Hash-to-prime security parameter.")  # type: ignore[return-value]


def _build_vdf(lambda_: int, time_bits: int, input_hex: str, modulus_hex: str) -> WesolowskiVdf:
    modulus = _hex_arg(modulus_hex, "--modulus")
    if not any(modulus):
        raise typer.BadParameter("--modulus must be non-zero")
    return WesolowskiVdf(lambda_, time_bits, _hex_arg(input_hex, "--input"), modulus)


def _load_solution(path: str) -> Solution:
    if path == "-":
        text = sys.stdin.read()
    else:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    try:
        data: Dict[str, Any] = json.loads(text)
        return Solution.from_dict(data)
    except (ValueError, TypeError, AttributeError) as e:
        raise typer.BadParameter(f"--solution: not a solution JSON ({e})")


@app.command("bound")
def cmd_bound(lambda_: int = _opt_lambda()) -> None:
    """Show the candidate ceiling hash-to-prime uses for a lambda."""
    h = HashToPrime(lambda_)
    out = {
        "lambda": lambda_,
        "boundBits": h.bound_bits,
        "maxIntBits": int(h.max_int).bit_length(),
    }
    typer.echo(json.dumps(out, indent=2))


@app.command("prove")
def cmd_prove(
    time_bits: int = typer.Option(..., "--time-bits", "-t", min=0, help="Delay exponent: 2^t squarings."),
    input_hex: str = typer.Option(..., "--input", "-i", help="0x-hex VDF input (round seed)."),
    modulus_hex: str = typer.Option(..., "--modulus", "-m", help="0x-hex RSA-type modulus."),
    lambda_: int = _opt_lambda(),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Cancel the proof after this many seconds."),
) -> None:
    """Run the prover and print the solution JSON. Exit 2 if cancelled, 3 on a VDF error."""
    vdf = _build_vdf(lambda_, time_bits, input_hex, modulus_hex)
    token = CancellationToken()
    timer = threading.Timer(timeout, token.cancel) if timeout is not None else None
    if timer is not None:
        timer.daemon = True
        timer.start()

    start = time.perf_counter()
    try:
        solution = WesolowskiProver(vdf).prove(token)
    except VdfError as e:
        typer.echo(json.dumps({"error": type(e).__name__, "message": str(e)}, indent=2), err=True)
        raise typer.Exit(code=3)
    finally:
        if timer is not None:
            timer.cancel()
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    out: Dict[str, Any] = {
        "lambda": lambda_,
        "timeBits": time_bits,
        "iterations": int(vdf.iterations),
        **solution.to_dict(),
        "cancelled": solution.is_empty,
        "proveMs": round(elapsed_ms, 3),
    }
    typer.echo(json.dumps(out, indent=2))
    if solution.is_empty:
        raise typer.Exit(code=2)


@app.command("verify")
def cmd_verify(
    time_bits: int = typer.Option(..., "--time-bits", "-t", min=0, help="Delay exponent used by the prover."),
    input_hex: str = typer.Option(..., "--input", "-i", help="0x-hex VDF input."),
    modulus_hex: str = typer.Option(..., "--modulus", "-m", help="0x-hex RSA-type modulus."),
    lambda_: int = _opt_lambda(),
    proof_hex: Optional[str] = typer.Option(None, "--proof", help="0x-hex proof (sol1)."),
    output_hex: Optional[str] = typer.Option(None, "--output", help="0x-hex output (sol2)."),
    solution_file: Optional[str] = typer.Option(None, "--solution", "-s", help="Solution JSON file ('-' for stdin)."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only set the exit code."),
) -> None:
    """Verify a solution. Exit 0 if valid, 1 otherwise."""
    if solution_file is not None:
        solution = _load_solution(solution_file)
    elif proof_hex is not None and output_hex is not None:
        solution = Solution(_hex_arg(proof_hex, "--proof"), _hex_arg(output_hex, "--output"))
    else:
        raise typer.BadParameter("pass --solution, or both --proof and --output")

    vdf = _build_vdf(lambda_, time_bits, input_hex, modulus_hex)
    start = time.perf_counter()
    ok, reason = WesolowskiVerifier(vdf).verify_with_report(solution)
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    if not quiet:
        typer.echo(json.dumps({"ok": ok, "reason": reason, "verifyMs": round(elapsed_ms, 3)}, indent=2))
    raise typer.Exit(code=0 if ok else 1)


def main(argv: Optional[Sequence[str]] = None) -> None:  # pragma: no cover - thin wrapper
    """Entry-point for the ``dagvdf`` console script and ``python -m dagvdf.cli``."""
    try:
        app(args=list(argv) if argv is not None else None, prog_name="dagvdf")
    except KeyboardInterrupt:
        typer.echo("", err=True)
        sys.exit(130)


if __name__ == "__main__":  # pragma: no cover
    main()
