# gitclient/backends/cli/submodules.py

"""
Parsing of ``git config --get-regexp`` output for submodule URLs.

Lines have the shape ``submodule.<name>.url <url>``. Submodule names may
contain spaces and dots (including ``.url``), so the name is matched
greedily up to the last ``.url`` that is followed by whitespace; the URL
is the single whitespace-free token at the end of the line.
"""

import re

from ...models import SubmoduleEntry

SUBMODULE_URL_CONFIG_KEY = r"^submodule\.(.+)\.url"

SUBMODULE_URL_PATTERN = re.compile(
    r"^submodule\.(?P<name>.+)\.url\s+(?P<url>[^\s]+)[ \t\r]*$", re.MULTILINE
)


def parse_submodule_urls(config_output: str) -> list[SubmoduleEntry]:
    """Submodule name and URL for each matching line, in file order."""
    return [
        SubmoduleEntry(name=match.group("name"), url=match.group("url"))
        for match in SUBMODULE_URL_PATTERN.finditer(config_output or "")
    ]
