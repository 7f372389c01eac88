"""Tests for branch specification normalization."""

import pytest

from gitclient.refs.normalizer import extract_branch_name, normalize_branch_spec


class TestNormalizeBranchSpec:
    """Candidate references for a branch specification."""

    def test_plain_branch(self):
        candidates = normalize_branch_spec("master", ["origin"])

        assert candidates[0] == "refs/heads/master"
        assert candidates[-1] == "master"

    def test_remote_prefix_is_stripped(self):
        candidates = normalize_branch_spec("origin/master", ["origin"])

        assert candidates[0] == "refs/heads/master"
        assert "refs/heads/origin/master" in candidates
        assert "origin/master" in candidates

    def test_remotes_prefix_is_stripped(self):
        candidates = normalize_branch_spec("remotes/origin/develop", ["origin"])

        assert candidates[0] == "refs/heads/develop"

    def test_longest_remote_name_wins(self):
        candidates = normalize_branch_spec("rem4/xy/feature", ["rem4", "rem4/xy"])

        assert candidates[0] == "refs/heads/feature"

    def test_unknown_remote_is_not_stripped(self):
        candidates = normalize_branch_spec("upstream/master", ["origin"])

        assert candidates[0] == "refs/heads/upstream/master"
        assert "refs/heads/master" not in candidates

    def test_tag_prefers_peeled_reference(self):
        candidates = normalize_branch_spec("refs/tags/v1.0", ["origin"])

        assert candidates[:2] == ["refs/tags/v1.0^{}", "refs/tags/v1.0"]

    @pytest.mark.parametrize("spec", ["refs/heads/master", "refs/remotes/origin/master"])
    def test_qualified_reference_comes_first(self, spec):
        assert normalize_branch_spec(spec, ["origin"])[0] == spec

    def test_no_duplicates_and_spec_always_present(self):
        candidates = normalize_branch_spec("refs/heads/master")

        assert len(candidates) == len(set(candidates))
        assert "refs/heads/master" in candidates


class TestExtractBranchName:
    """Names queried with ls-remote."""

    @pytest.mark.parametrize(
        "spec,expected",
        [
            ("master", "refs/heads/master"),
            ("origin/master", "refs/heads/master"),
            ("remotes/origin/master", "refs/heads/master"),
            ("refs/remotes/origin/master", "refs/heads/master"),
            ("refs/heads/master", "refs/heads/master"),
            ("refs/tags/v1.0", "refs/tags/v1.0"),
            ("*/master", "*/master"),
            ("refs/notes/commits", "refs/notes/commits"),
        ],
    )
    def test_extract(self, spec, expected):
        assert extract_branch_name(spec) == expected
