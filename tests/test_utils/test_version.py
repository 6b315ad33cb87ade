"""Tests for autorelease.utils.version."""

import pytest

from autorelease.exceptions import ConfigurationError, VersionError
from autorelease.utils.version import (
    add_tag_prefix,
    bump_version,
    increment,
    is_valid_version,
    parse_version,
)


class TestParseVersion:
    """Tests for parse_version."""

    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("1.2.3", (1, 2, 3)),
            ("v1.2.3", (1, 2, 3)),
            ("release-10.0.7", (10, 0, 7)),
            (" 0.0.1 ", (0, 0, 1)),
        ],
    )
    def test_valid_tags(self, tag: str, expected: tuple[int, int, int]) -> None:
        assert parse_version(tag) == expected

    @pytest.mark.parametrize("tag", ["latest", "1.2", "1.2.3.4", "v1.2.x", "1.2.3-rc1"])
    def test_invalid_tags(self, tag: str) -> None:
        with pytest.raises(VersionError) as exc_info:
            parse_version(tag)
        assert tag in str(exc_info.value)

    def test_empty_tag(self) -> None:
        with pytest.raises(VersionError):
            parse_version("")

    def test_is_valid_version(self) -> None:
        assert is_valid_version("v2.0.0")
        assert not is_valid_version("nightly")
        assert not is_valid_version("")


class TestBumpVersion:
    """Tests for bump_version."""

    @pytest.mark.parametrize(
        ("kind", "expected"),
        [("major", "1.0.0"), ("minor", "0.1.0"), ("patch", "0.0.1")],
    )
    def test_first_release(self, kind: str, expected: str) -> None:
        """Without a previous tag the bump applies to 0.0.0."""
        assert bump_version(None, kind) == expected

    @pytest.mark.parametrize(
        ("kind", "expected"),
        [("major", "2.0.0"), ("minor", "1.3.0"), ("patch", "1.2.4")],
    )
    def test_bump_from_tag(self, kind: str, expected: str) -> None:
        assert bump_version("1.2.3", kind) == expected

    def test_prefix_is_not_carried_over(self) -> None:
        assert bump_version("v1.2.3", "patch") == "1.2.4"

    def test_empty_tag_is_first_release(self) -> None:
        assert bump_version("", "minor") == "0.1.0"

    def test_missing_release_type(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            bump_version("1.0.0", None)
        assert "No release type" in str(exc_info.value)

    def test_unknown_release_type(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            bump_version("1.0.0", "huge")
        assert "huge" in str(exc_info.value)

    def test_invalid_previous_tag(self) -> None:
        with pytest.raises(VersionError):
            bump_version("nightly", "patch")

    def test_increment_resets_lower_components(self) -> None:
        assert increment((1, 9, 9), "minor") == (1, 10, 0)
        assert increment((1, 9, 9), "major") == (2, 0, 0)


class TestAddTagPrefix:
    """Tests for add_tag_prefix."""

    def test_with_prefix(self) -> None:
        assert add_tag_prefix("1.2.3", "v") == "v1.2.3"

    def test_without_prefix(self) -> None:
        assert add_tag_prefix("1.2.3") == "1.2.3"
