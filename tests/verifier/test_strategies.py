"""Tests for the host key verification strategies."""

import logging

import pytest

from gitclient.core.exceptions import ConfigurationError
from gitclient.process.tempfiles import ScopedTempFiles
from gitclient.verifier.known_hosts import KnownHosts
from gitclient.verifier.strategies import (
    STRATEGIES,
    AcceptFirstConnectionStrategy,
    KnownHostsFileVerificationStrategy,
    ManuallyProvidedKeyVerificationStrategy,
    NoHostKeyVerificationStrategy,
)

KEY = "AAAAC3NzaC1lZDI1NTE5AAAAIKnownKey"
OTHER_KEY = "AAAAC3NzaC1lZDI1NTE5AAAAIOtherKey"

log = logging.getLogger("gitclient.tests.verifier")


@pytest.fixture
def known_hosts_file(tmp_path):
    path = tmp_path / "known_hosts"
    path.write_text(f"github.com ssh-ed25519 {KEY}\n", encoding="utf-8")
    return path


class TestNoHostKeyVerification:
    def test_options(self):
        strategy = NoHostKeyVerificationStrategy()

        assert strategy.ssh_options("github.com", None, None, log) == ["-o", "StrictHostKeyChecking=no"]
        assert strategy.verify_host_key("github.com", None, "ssh-ed25519", OTHER_KEY, log)


class TestKnownHostsFileVerification:
    def test_options_with_custom_file(self, known_hosts_file):
        strategy = KnownHostsFileVerificationStrategy(known_hosts_file)

        assert strategy.ssh_options("github.com", None, None, log) == [
            "-o",
            "StrictHostKeyChecking=yes",
            "-o",
            f"UserKnownHostsFile={known_hosts_file}",
        ]

    def test_verify(self, known_hosts_file):
        strategy = KnownHostsFileVerificationStrategy(known_hosts_file)

        assert strategy.verify_host_key("github.com", 22, "ssh-ed25519", KEY, log)
        assert not strategy.verify_host_key("github.com", 22, "ssh-ed25519", OTHER_KEY, log)
        assert not strategy.verify_host_key("gitlab.com", 22, "ssh-ed25519", KEY, log)

    def test_missing_file_warns(self, tmp_path, caplog):
        strategy = KnownHostsFileVerificationStrategy(tmp_path / "missing")

        with caplog.at_level(logging.WARNING, logger=log.name):
            assert not strategy.verify_host_key("github.com", None, "ssh-ed25519", KEY, log)

        assert any("does not exist" in message for message in caplog.messages)


class TestAcceptFirstConnection:
    def test_unknown_host_is_not_strict(self, known_hosts_file):
        options = AcceptFirstConnectionStrategy(known_hosts_file).ssh_options("gitlab.com", None, None, log)

        assert options[:4] == ["-o", "StrictHostKeyChecking=no", "-o", "HashKnownHosts=yes"]
        assert f"UserKnownHostsFile={known_hosts_file}" in options

    def test_known_host_is_strict(self, known_hosts_file):
        options = AcceptFirstConnectionStrategy(known_hosts_file).ssh_options("github.com", 22, None, log)

        assert "StrictHostKeyChecking=yes" in options

    def test_missing_file_is_not_strict(self, tmp_path):
        options = AcceptFirstConnectionStrategy(tmp_path / "new").ssh_options("github.com", None, None, log)

        assert "StrictHostKeyChecking=no" in options

    def test_first_key_is_recorded_then_enforced(self, tmp_path):
        path = tmp_path / "ssh" / "known_hosts"
        strategy = AcceptFirstConnectionStrategy(path)

        assert strategy.verify_host_key("git.example.com", 2222, "ssh-ed25519", KEY, log)
        assert path.exists()
        assert strategy.verify_host_key("git.example.com", 2222, "ssh-ed25519", KEY, log)
        assert not strategy.verify_host_key("git.example.com", 2222, "ssh-ed25519", OTHER_KEY, log)
        assert len(KnownHosts.load(path).entries) == 1


class TestManuallyProvidedKeys:
    def test_empty_keys_rejected(self):
        with pytest.raises(ConfigurationError):
            ManuallyProvidedKeyVerificationStrategy("  \n")

    def test_options_write_temp_known_hosts(self, workspace):
        strategy = ManuallyProvidedKeyVerificationStrategy(f"github.com ssh-ed25519 {KEY}")

        with ScopedTempFiles(workspace) as scope:
            options = strategy.ssh_options("github.com", None, scope, log)
            known_hosts = options[-1].split("=", 1)[1]

            assert options[:3] == ["-o", "StrictHostKeyChecking=yes", "-o"]
            with open(known_hosts, encoding="utf-8") as handle:
                assert handle.read() == f"github.com ssh-ed25519 {KEY}\n"

        assert scope.files == []

    def test_options_need_temp_files(self):
        strategy = ManuallyProvidedKeyVerificationStrategy(f"github.com ssh-ed25519 {KEY}")

        with pytest.raises(ConfigurationError):
            strategy.ssh_options("github.com", None, None, log)

    def test_verify(self):
        strategy = ManuallyProvidedKeyVerificationStrategy(f"github.com ssh-ed25519 {KEY}")

        assert strategy.verify_host_key("github.com", None, "ssh-ed25519", KEY, log)
        assert not strategy.verify_host_key("github.com", None, "ssh-ed25519", OTHER_KEY, log)

    def test_repr_hides_keys(self):
        assert KEY not in repr(ManuallyProvidedKeyVerificationStrategy(f"github.com ssh-ed25519 {KEY}"))


class TestEquality:
    def test_same_type_and_settings_are_equal(self):
        assert NoHostKeyVerificationStrategy() == NoHostKeyVerificationStrategy()
        assert ManuallyProvidedKeyVerificationStrategy("h t k") == ManuallyProvidedKeyVerificationStrategy("h t k")
        assert ManuallyProvidedKeyVerificationStrategy("h t k") != ManuallyProvidedKeyVerificationStrategy("h t x")
        assert NoHostKeyVerificationStrategy() != AcceptFirstConnectionStrategy()

    def test_registry_names(self):
        assert set(STRATEGIES) == {"none", "accept_first", "known_hosts", "manually_provided"}
