# gitclient/core/logging/filters.py

"""
Log filters for the git client.

Command lines logged by the process layer may contain repository URLs
with embedded user names and passwords; the redaction filter rewrites
them before any handler sees the record.
"""

import logging
import re

from ...utils import redact_url_credentials


class CredentialRedactionFilter(logging.Filter):
    """Redact credentials embedded in URLs and any extra sensitive patterns."""

    def __init__(self, sensitive_patterns: str | list[str] | None = None):
        """Initialize the redaction filter.

        Args:
            sensitive_patterns: Additional regular expressions whose matches
                are replaced by ``[REDACTED]``.
        """
        super().__init__()
        if isinstance(sensitive_patterns, str):
            sensitive_patterns = [sensitive_patterns]
        self.sensitive_patterns = [re.compile(p) for p in sensitive_patterns or []]
        self.replacement = "[REDACTED]"

    def filter(self, record: logging.LogRecord) -> bool:
        """Rewrite the record message in place; never drops a record.

        Args:
            record: Log record to filter.

        Returns:
            Always True.
        """
        message = record.getMessage()
        redacted = redact_url_credentials(message)
        for pattern in self.sensitive_patterns:
            redacted = pattern.sub(self.replacement, redacted)

        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True
