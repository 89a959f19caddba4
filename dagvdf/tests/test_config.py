import json

import pytest

from dagvdf.config import DEFAULT, SortitionParams, VdfConfig, VrfConfig


def test_defaults_validate():
    DEFAULT.validate()
    assert DEFAULT.vdf.lambda_bound == 1500
    assert DEFAULT.vdf.hash_options() == {"rounds": 30, "max_iter": 10_000}
    assert DEFAULT.vdf.number_of_difficulties == 2


@pytest.mark.parametrize(
    "kwargs",
    [
        {"difficulty_min": 5, "difficulty_max": 4},
        {"difficulty_max": 64},
        {"difficulty_stale": 70},
        {"lambda_bound": 70_000},
        {"difficulty_min": -1},
        {"miller_rabin_rounds": 0},
        {"max_prime_search_iter": 0},
    ],
)
def test_vdf_config_rejects(kwargs):
    with pytest.raises(ValueError):
        VdfConfig(**kwargs).validate()


def test_vrf_threshold_range():
    with pytest.raises(ValueError):
        VrfConfig(threshold_upper=0x10000).validate()


def test_from_env(monkeypatch):
    monkeypatch.setenv("DAGVDF_VRF_THRESHOLD_UPPER", "0x1000")
    monkeypatch.setenv("DAGVDF_DIFFICULTY_MIN", "16")
    monkeypatch.setenv("DAGVDF_DIFFICULTY_MAX", "21")
    monkeypatch.setenv("DAGVDF_DIFFICULTY_STALE", "23")
    monkeypatch.setenv("DAGVDF_MILLER_RABIN_ROUNDS", "40")
    p = SortitionParams.from_env()
    assert p.vrf.threshold_upper == 4096
    assert (p.vdf.difficulty_min, p.vdf.difficulty_max, p.vdf.difficulty_stale) == (16, 21, 23)
    assert p.vdf.miller_rabin_rounds == 40
    assert p.vdf.lambda_bound == 1500


def test_from_env_custom_prefix(monkeypatch):
    monkeypatch.setenv("NODE_LAMBDA_BOUND", "256")
    assert SortitionParams.from_env("NODE_").vdf.lambda_bound == 256


def test_from_env_bad_values(monkeypatch):
    monkeypatch.setenv("DAGVDF_DIFFICULTY_MIN", "sixteen")
    with pytest.raises(ValueError, match="DAGVDF_DIFFICULTY_MIN"):
        SortitionParams.from_env()

    monkeypatch.setenv("DAGVDF_DIFFICULTY_MIN", "30")
    monkeypatch.setenv("DAGVDF_DIFFICULTY_MAX", "20")
    with pytest.raises(ValueError):
        SortitionParams.from_env()


def test_from_file_json_round_trip(tmp_path):
    params = SortitionParams(
        vrf=VrfConfig(threshold_upper=4096),
        vdf=VdfConfig(difficulty_min=16, difficulty_max=21, difficulty_stale=23),
    )
    path = tmp_path / "params.json"
    path.write_text(params.to_json(), encoding="utf-8")
    assert SortitionParams.from_file(str(path)) == params
    assert json.loads(params.to_json())["vdf"]["difficulty_stale"] == 23


def test_from_file_yaml(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_text(
        "vrf:\n"
        "  threshold_upper: 2048\n"
        "vdf:\n"
        "  difficulty_min: 10\n"
        "  difficulty_max: 12\n"
        "  lambda_bound: 256\n",
        encoding="utf-8",
    )
    p = SortitionParams.from_file(str(path))
    assert p.vrf.threshold_upper == 2048
    assert (p.vdf.difficulty_min, p.vdf.difficulty_max, p.vdf.lambda_bound) == (10, 12, 256)
    assert p.vdf.difficulty_stale == 0


def test_from_file_rejects_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        SortitionParams.from_file(str(path))


def test_from_file_rejects_garbage(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("vdf: [unclosed\n", encoding="utf-8")
    with pytest.raises(ValueError):
        SortitionParams.from_file(str(path))
