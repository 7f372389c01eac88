"""Tests for git version parsing."""

import pytest

from gitclient.process.versions import GitVersion


class TestGitVersion:
    @pytest.mark.parametrize(
        "output,expected",
        [
            ("git version 2.30.1", GitVersion(2, 30, 1, 0)),
            ("git version 2.43.0\n", GitVersion(2, 43, 0, 0)),
            ("git version 2.39.2.windows.1", GitVersion(2, 39, 2, 1)),
            ("git version 1.9.5.msysgit.0", GitVersion(1, 9, 5, 0)),
            ("git version 2.24.3 (Apple Git-128)", GitVersion(2, 24, 3, 0)),
            ("git version 2", GitVersion(2, 0, 0, 0)),
            ("not a version", GitVersion(0, 0, 0, 0)),
            ("", GitVersion(0, 0, 0, 0)),
        ],
    )
    def test_parse(self, output, expected):
        assert GitVersion.parse(output) == expected

    def test_is_at_least(self):
        version = GitVersion.parse("git version 2.30.1")

        assert version.is_at_least(2, 30, 1)
        assert version.is_at_least(1, 9)
        assert not version.is_at_least(2, 31)
        assert not version.is_at_least(2, 30, 1, 1)

    def test_str(self):
        assert str(GitVersion.parse("git version 2.30.1")) == "2.30.1.0"
