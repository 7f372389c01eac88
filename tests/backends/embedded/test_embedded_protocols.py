"""Tests for the URL schemes accepted by the embedded backend."""

import pytest

from gitclient.backends.embedded import check_protocol, is_supported_protocol, url_scheme
from gitclient.core.exceptions import UnsupportedProtocolError


class TestUrlScheme:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://example.com/repo.git", "https"),
            ("HTTP://example.com/repo.git", "http"),
            ("git+ssh://git@example.com/repo.git", "git+ssh"),
            ("file:///srv/git/repo.git", "file"),
            ("s3://bucket/repo", "s3"),
            ("git@example.com:org/repo.git", None),
            ("/srv/git/repo.git", None),
            ("", None),
        ],
    )
    def test_scheme(self, url, expected):
        assert url_scheme(url) == expected


class TestCheckProtocol:
    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/repo.git",
            "http://example.com/repo.git",
            "ssh://git@example.com/repo.git",
            "git+ssh://git@example.com/repo.git",
            "git://example.com/repo.git",
            "file:///srv/git/repo.git",
            "git@example.com:org/repo.git",
            "/srv/git/repo.git",
        ],
    )
    def test_supported(self, url):
        assert is_supported_protocol(url)
        assert check_protocol(url) == url

    @pytest.mark.parametrize("url", ["s3://bucket/repo", "ftp://example.com/repo.git", "rsync://host/repo"])
    def test_unsupported(self, url):
        assert not is_supported_protocol(url)

        with pytest.raises(UnsupportedProtocolError) as excinfo:
            check_protocol(url)

        assert str(excinfo.value) == f"unsupported protocol in URL {url}"
        assert excinfo.value.error_code == "UNSUPPORTED_PROTOCOL"
        assert excinfo.value.details == {"url": url}
