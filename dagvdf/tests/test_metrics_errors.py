import pytest

from dagvdf.errors import InvalidVdfSortition, PrimeSearchExhausted, VdfError
from dagvdf.vdf import Solution, WesolowskiProver, WesolowskiVerifier


def test_unknown_labels_fold_into_catch_all(metrics, registry):
    metrics.record_proof("exploded")
    metrics.record_verification("weird")
    metrics.record_cache("???")
    assert registry.get_sample_value("dagvdf_vdf_proofs_total", {"outcome": "hash_failed"}) == 1.0
    assert registry.get_sample_value("dagvdf_vdf_verifications_total", {"outcome": "malformed"}) == 1.0
    assert registry.get_sample_value("dagvdf_vdf_precision_cache_total", {"result": "miss"}) == 1.0


def test_timers_observe_even_on_error(metrics, registry):
    with pytest.raises(RuntimeError):
        with metrics.verify_timer():
            raise RuntimeError("boom")
    assert registry.get_sample_value("dagvdf_vdf_verify_seconds_count") == 1.0


def test_verifier_outcomes_are_counted(metrics, registry, small_vdf):
    sol = WesolowskiProver(small_vdf, metrics=metrics).prove()
    v = WesolowskiVerifier(small_vdf, metrics=metrics)
    v.verify(sol)
    v.verify(Solution(sol.proof, b"\x02"))
    v.verify(Solution(b"", b""))

    name = "dagvdf_vdf_verifications_total"
    assert registry.get_sample_value(name, {"outcome": "accepted"}) == 1.0
    assert registry.get_sample_value(name, {"outcome": "rejected"}) == 1.0
    assert registry.get_sample_value(name, {"outcome": "malformed"}) == 1.0
    assert registry.get_sample_value("dagvdf_vdf_verify_seconds_count") == 3.0


def test_error_hierarchy_and_messages():
    e = PrimeSearchExhausted(lambda_=128, iterations=10_000, bound_bits=101)
    assert isinstance(e, VdfError)
    assert "10000 draws" in str(e) and "lambda=128" in str(e)

    m = InvalidVdfSortition(reason="difficulty-mismatch", difficulty=3, expected=2)
    assert isinstance(m, VdfError)
    assert str(m) == "InvalidVdfSortition: difficulty-mismatch difficulty=3 expected=2"
    assert str(InvalidVdfSortition(reason="vdf-verify-failed", difficulty=3)).endswith("difficulty=3")

    with pytest.raises(VdfError):
        raise m


@pytest.mark.parametrize(
    "exc",
    [
        PrimeSearchExhausted(lambda_=128, iterations=3, bound_bits=1),
        InvalidVdfSortition(reason="vdf-verify-failed", difficulty=3),
    ],
)
def test_errors_keep_their_type_through_timers(metrics, exc):
    # the timer context managers assign __traceback__ on the way out
    with pytest.raises(type(exc)) as ei:
        with metrics.prove_timer():
            raise exc
    assert ei.value is exc
    assert ei.value.__traceback__ is not None
