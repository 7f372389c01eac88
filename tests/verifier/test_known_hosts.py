"""Tests for known_hosts parsing and matching."""

import pytest

from gitclient.verifier.known_hosts import (
    HostKeyStatus,
    KnownHosts,
    check_hashed,
    hash_hostname,
    host_field_matches,
    host_key_name,
)

KEY_A = "AAAAC3NzaC1lZDI1NTE5AAAAIKeyA"
KEY_B = "AAAAC3NzaC1lZDI1NTE5AAAAIKeyB"


class TestHostKeyName:
    @pytest.mark.parametrize(
        "host,port,expected",
        [
            ("github.com", None, "github.com"),
            ("github.com", 22, "github.com"),
            ("github.com", 0, "github.com"),
            ("git.example.com", 2222, "[git.example.com]:2222"),
        ],
    )
    def test_name(self, host, port, expected):
        assert host_key_name(host, port) == expected


class TestHashing:
    def test_round_trip(self):
        entry = hash_hostname("github.com", salt=b"s" * 20)

        assert entry.startswith("|1|")
        assert check_hashed(entry, "github.com")
        assert not check_hashed(entry, "gitlab.com")

    @pytest.mark.parametrize("entry", ["github.com", "|1|onlysalt", "|1|!!!|???", "|1|c2FsdA==|aGFzaA=="])
    def test_malformed(self, entry):
        assert not check_hashed(entry, "github.com")


class TestHostFieldMatches:
    @pytest.mark.parametrize(
        "field,hostname,expected",
        [
            ("github.com", "github.com", True),
            ("github.com", "GITHUB.com", True),
            ("gitlab.com,github.com", "github.com", True),
            ("*.example.com", "git.example.com", True),
            ("git?.example.com", "git1.example.com", True),
            ("*.example.com,!bad.example.com", "bad.example.com", False),
            ("[git.example.com]:2222", "[git.example.com]:2222", True),
            ("", "github.com", False),
        ],
    )
    def test_matches(self, field, hostname, expected):
        assert host_field_matches(field, hostname) is expected


class TestKnownHosts:
    def test_parse_skips_comments_and_malformed(self):
        known = KnownHosts.parse(
            "# comment\n\ngithub.com ssh-ed25519 " + KEY_A + "\nbroken-line\n"
            "@cert-authority *.example.com ssh-rsa " + KEY_B + "\n"
        )

        assert known.host_names() == ["github.com", "*.example.com"]
        assert known.entries[1].marker == "@cert-authority"

    def test_verify(self):
        known = KnownHosts.parse(f"github.com ssh-ed25519 {KEY_A}\n")

        assert known.verify("github.com", 22, "ssh-ed25519", KEY_A) is HostKeyStatus.OK
        assert known.verify("github.com", None, "ssh-ed25519", KEY_B) is HostKeyStatus.CHANGED
        assert known.verify("gitlab.com", None, "ssh-ed25519", KEY_A) is HostKeyStatus.NEW

    def test_verify_non_default_port(self):
        known = KnownHosts.parse(f"[git.example.com]:2222 ssh-ed25519 {KEY_A}\n")

        assert known.verify("git.example.com", 2222, "ssh-ed25519", KEY_A) is HostKeyStatus.OK
        assert known.verify("git.example.com", None, "ssh-ed25519", KEY_A) is HostKeyStatus.NEW

    def test_revoked_key(self):
        known = KnownHosts.parse(
            f"github.com ssh-ed25519 {KEY_A}\n@revoked github.com ssh-ed25519 {KEY_A}\n"
        )

        assert known.verify("github.com", None, "ssh-ed25519", KEY_A) is HostKeyStatus.CHANGED

    def test_hashed_entries(self):
        known = KnownHosts.parse(f"{hash_hostname('github.com')} ssh-ed25519 {KEY_A}\n")

        assert known.knows_host("github.com")
        assert known.verify("github.com", None, "ssh-ed25519", KEY_A) is HostKeyStatus.OK

    def test_add_appends_to_file(self, tmp_path):
        path = tmp_path / "ssh" / "known_hosts"
        known = KnownHosts.load(path)

        known.add("git.example.com", 2222, "ssh-ed25519", KEY_A, hashed=False)
        known.add("github.com", None, "ssh-ed25519", KEY_B)

        reloaded = KnownHosts.load(path)
        assert reloaded.host_names()[0] == "[git.example.com]:2222"
        assert reloaded.host_names()[1].startswith("|1|")
        assert reloaded.verify("github.com", None, "ssh-ed25519", KEY_B) is HostKeyStatus.OK

    def test_load_missing_file(self, tmp_path):
        assert KnownHosts.load(tmp_path / "missing").entries == []
