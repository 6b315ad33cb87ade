"""Tests for release triggers and commit classification."""

import pytest

from autorelease.commits import (
    CommitCompliance,
    CommitRecord,
    classify_conventional,
    find_nonconventional,
    has_trigger_marker,
    parse_release_trigger,
)


class TestParseReleaseTrigger:
    """Tests for parse_release_trigger and has_trigger_marker."""

    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("feat: add x !release: minor", "minor"),
            ("!release: major", "major"),
            ("fix: y !release:patch", "patch"),
            ("chore: z !release:   PATCH", "patch"),
            ("docs: w !Release: Minor", "minor"),
            ("feat: big change\n\nBody text\n\n!release: major", "major"),
        ],
    )
    def test_valid_triggers(self, message: str, expected: str) -> None:
        assert parse_release_trigger(message) == expected

    def test_no_trigger(self) -> None:
        assert parse_release_trigger("feat: add x") is None
        assert has_trigger_marker("feat: add x") is False

    def test_marker_without_kind(self) -> None:
        """A bare marker is detected but yields no release type."""
        message = "fix: y !release"
        assert parse_release_trigger(message) is None
        assert has_trigger_marker(message) is True

    def test_marker_with_unknown_kind(self) -> None:
        message = "fix: y !release: huge"
        assert parse_release_trigger(message) is None
        assert has_trigger_marker(message) is True

    def test_empty_message(self) -> None:
        assert parse_release_trigger("") is None
        assert has_trigger_marker("") is False


class TestClassifyConventional:
    """Tests for classify_conventional."""

    @pytest.mark.parametrize(
        "message",
        [
            "feat: add login",
            "fix(parser): handle empty input",
            "docs: update readme",
            "chore: bump deps",
            "refactor: split module",
            "style: format",
            "perf: faster glob",
            "fix: crash\n\nthis body is ignored",
        ],
    )
    def test_compliant(self, message: str) -> None:
        assert classify_conventional(message) is CommitCompliance.COMPLIANT

    @pytest.mark.parametrize(
        "message",
        [
            "update readme",
            "Feat: add login",
            "build: new pipeline",
            "feat(): empty scope",
            "feat add login",
            "wip\n\nfeat: only in body",
            "",
        ],
    )
    def test_non_compliant(self, message: str) -> None:
        assert classify_conventional(message) is CommitCompliance.NON_COMPLIANT

    def test_find_nonconventional(self) -> None:
        good = CommitRecord(sha="a" * 40, message="fix: crash")
        bad = CommitRecord(sha="b" * 40, message="oops")
        assert find_nonconventional([good, bad]) == [bad]


class TestCommitRecord:
    """Tests for CommitRecord."""

    def test_properties(self) -> None:
        commit = CommitRecord(
            sha="abcdef1234567890",
            message="fix: crash\n\n Details here \n",
            author_name="Alice Example",
            author_login="alice",
        )
        assert commit.title == "fix: crash"
        assert commit.body == "Details here"
        assert commit.short_sha == "abcdef1"
        assert commit.author == "alice"

    def test_author_falls_back_to_name(self) -> None:
        commit = CommitRecord(sha="abc", message="x", author_name="Alice Example")
        assert commit.author == "Alice Example"

    def test_from_api(self) -> None:
        data = {
            "sha": "abcdef1234567890abcdef1234567890abcdef12",
            "commit": {
                "message": "feat: x",
                "author": {"name": "Alice Example", "email": "a@example.com"},
            },
            "author": {"login": "alice"},
        }
        commit = CommitRecord.from_api(data)
        assert commit.sha == data["sha"]
        assert commit.message == "feat: x"
        assert commit.author_name == "Alice Example"
        assert commit.author_login == "alice"

    def test_from_api_without_linked_account(self) -> None:
        """GitHub returns author: null when the email has no account."""
        data = {
            "sha": "abc",
            "commit": {"message": "fix: y", "author": {"name": "Bob"}},
            "author": None,
        }
        commit = CommitRecord.from_api(data)
        assert commit.author_login is None
        assert commit.author == "Bob"
