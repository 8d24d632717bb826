"""Tests for package records and location names."""

import json

import pytest

from ..models import Package, PackageDecodeError
from ..utils.names import get_package_name, is_remote_location, parse_location


@pytest.mark.parametrize(
    "location,expected",
    [
        ("https://example.com/foo.git", "foo"),
        ("git@github.com:org/Bar.git", "Bar"),
        ("https://example.com/x.gitty.git", "x"),
        ("/Users/me/packages/local", "local"),
        ("/Users/me/packages/local/", "local"),
        ("relative/checkout", "checkout"),
    ],
)
def test_get_package_name(location: str, expected: str) -> None:
    assert get_package_name(location) == expected


def test_is_remote_location() -> None:
    assert is_remote_location("https://example.com/foo.git")
    assert not is_remote_location("/path/to/foo")


@pytest.mark.parametrize(
    "text",
    ["", "https://example.com/my repo.git", "tab\there", "https://example.com/.git", "/", "foo/..", "bell\x07"],
)
def test_parse_location_rejects(text: str) -> None:
    with pytest.raises(ValueError):
        parse_location(text)


def test_parse_location_accepts() -> None:
    assert parse_location("https://example.com/a.git") == "https://example.com/a.git"


def test_encode_decode() -> None:
    package = Package(name="foo", url="https://example.com/foo.git", major_version=2)
    assert Package.decode(package.encode()) == package


def test_dependency_string() -> None:
    package = Package(name="foo", url="https://example.com/foo.git", major_version=2)
    assert (
        package.dependency_string
        == '.Package(url: "https://example.com/foo.git", majorVersion: 2)'
    )
    assert package.is_remote


def test_with_major_version_keeps_original() -> None:
    package = Package(name="foo", url="/src/foo", major_version=1)
    bumped = package.with_major_version(3)
    assert bumped.major_version == 3
    assert package.major_version == 1
    assert not bumped.is_remote


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[]",
        json.dumps({"name": "foo", "url": "u", "majorVersion": 1}),
        json.dumps({"formatVersion": True, "name": "foo", "url": "u", "majorVersion": 1}),
        json.dumps({"formatVersion": 2, "name": "foo", "url": "u", "majorVersion": 1}),
        json.dumps({"formatVersion": 1, "name": "foo", "url": "u"}),
        json.dumps({"formatVersion": 1, "name": "foo", "url": "u", "majorVersion": "1"}),
        json.dumps({"formatVersion": 1, "name": "foo", "url": "u", "majorVersion": -1}),
        json.dumps({"formatVersion": 1, "name": "foo", "url": "u", "majorVersion": True}),
        json.dumps(
            {"formatVersion": 1, "name": "foo", "url": "u", "majorVersion": 1, "x": 0}
        ),
    ],
)
def test_decode_rejects_incomplete_records(text: str) -> None:
    with pytest.raises(PackageDecodeError):
        Package.decode(text)
