# gitclient/utils.py

"""Small text helpers shared by both backends."""

import re

_URL_CREDENTIALS_PATTERN = re.compile(
    r"(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]*://)(?P<cred>[^/\s@]+)@(?P<rest>[^\s]+)"
)


def redact_url_credentials(text: str) -> str:
    """Replace the user-info part of any URL in ``text`` with ``****``."""
    if not text:
        return text
    return _URL_CREDENTIALS_PATTERN.sub(
        lambda m: f"{m.group('scheme')}****@{m.group('rest')}", text
    )


def first_line(text: str | None) -> str | None:
    """
    Return the only line of a single-line command result.

    Raises:
        ValueError: If the result has more than one line.
    """
    if text is None:
        return None
    lines = text.splitlines()
    if not lines:
        return None
    if len(lines) > 1:
        raise ValueError("Result has multiple lines")
    return lines[0]
