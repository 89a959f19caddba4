import pytest
from prometheus_client import CollectorRegistry

from dagvdf.metrics import Metrics
from dagvdf.vdf import WesolowskiVdf

# (2^61 - 1) * (2^89 - 1): a 150-bit composite whose group exponent has only
# small prime factors, so a ~100-bit challenge prime never divides it.
MERSENNE_MODULUS = ((1 << 61) - 1) * ((1 << 89) - 1)


def int_bytes(n: int) -> bytes:
    return n.to_bytes((n.bit_length() + 7) // 8, "big")


@pytest.fixture()
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture()
def metrics(registry: CollectorRegistry) -> Metrics:
    """Metrics bound to a private registry so counts start at zero."""
    return Metrics(registry=registry)


@pytest.fixture()
def small_vdf() -> WesolowskiVdf:
    """lambda=128, 2^4 squarings of 2 modulo 257."""
    return WesolowskiVdf(128, 4, b"\x02", b"\x01\x01")


@pytest.fixture()
def mersenne_vdf() -> WesolowskiVdf:
    """lambda=128, 2^8 squarings of 3 modulo a 150-bit composite."""
    return WesolowskiVdf(128, 8, b"\x03", int_bytes(MERSENNE_MODULUS))
