import pytest

import dagvdf
from dagvdf.version import BASE_VERSION, get_version, version_from_describe


@pytest.mark.parametrize(
    "described, expected",
    [
        ("v0.3.0-0-gabc1234", "0.3.0"),
        ("v0.3.0-0-gabc1234-dirty", "0.3.0.post0+gabc1234.dirty"),
        ("v0.3.0-7-gdeadbee", "0.3.0.post7+gdeadbee"),
        ("v1.2.10-12-g0f0f0f0-dirty\n", "1.2.10.post12+g0f0f0f0.dirty"),
        ("0.3.0-1-gabc", None),
        ("garbage", None),
    ],
)
def test_version_from_describe(described, expected):
    assert version_from_describe(described) == expected


def test_package_version_is_resolved():
    v = get_version()
    assert v and v == dagvdf.__version__
    assert isinstance(BASE_VERSION, str)
