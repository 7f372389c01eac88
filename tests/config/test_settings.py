"""Tests for client settings and the process-wide default timeout."""

from pydantic import ValidationError
import pytest

from gitclient.config.settings import (
    DEFAULT_TIMEOUT_SECONDS,
    GitClientSettings,
    get_default_timeout,
    get_settings,
    set_default_timeout,
    set_settings,
)
from gitclient.core.exceptions import ConfigurationError


class TestGitClientSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GITCLIENT_DEFAULT_TIMEOUT", raising=False)
        settings = GitClientSettings()

        assert settings.git_executable == "git"
        assert settings.default_timeout == DEFAULT_TIMEOUT_SECONDS
        assert settings.project_name == "gitclient"
        assert not settings.use_setsid

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("GITCLIENT_DEFAULT_TIMEOUT", "30")
        monkeypatch.setenv("GITCLIENT_GIT_EXECUTABLE", "/opt/git/bin/git")

        settings = GitClientSettings()

        assert settings.default_timeout == 30
        assert settings.git_executable == "/opt/git/bin/git"

    def test_invalid_timeout(self):
        with pytest.raises(ValidationError):
            GitClientSettings(default_timeout=0)

    def test_system_temp_directory_override(self, tmp_path):
        settings = GitClientSettings(temp_directory=str(tmp_path))

        assert settings.system_temp_directory() == str(tmp_path)


class TestDefaultTimeout:
    def test_follows_settings(self):
        set_settings(GitClientSettings(default_timeout=77))

        assert get_default_timeout() == 77

    def test_set_default_timeout(self):
        set_default_timeout(5)

        assert get_default_timeout() == 5

    @pytest.mark.parametrize("value", [0, -1, True, 1.5, "10"])
    def test_invalid(self, value):
        with pytest.raises(ConfigurationError):
            set_default_timeout(value)

    def test_reset_reloads(self, monkeypatch):
        monkeypatch.setenv("GITCLIENT_DEFAULT_TIMEOUT", "12")
        set_default_timeout(99)

        set_settings(None)

        assert get_default_timeout() == 12
        assert get_settings().default_timeout == 12
