"""
Custom logging filters for datafetch.
"""

import logging
import re
from typing import List, Pattern


class SensitiveDataFilter(logging.Filter):
    """
    Filter to mask credentials in log messages.

    Request headers are sent verbatim, so anything that ends up in a log line
    (URLs, error messages) may carry bearer tokens, API keys or URL
    credentials.
    """

    def __init__(self) -> None:
        """Initialize sensitive data filter."""
        super().__init__()

        self.patterns: List[Pattern[str]] = [
            # API keys and tokens
            re.compile(
                r'(api[_-]?key|token|secret)["\s]*[:=]["\s]*([a-zA-Z0-9+/=_\-.]{8,})',
                re.IGNORECASE,
            ),
            re.compile(r"(bearer\s+)([a-zA-Z0-9+/=_\-.]{8,})", re.IGNORECASE),
            re.compile(
                r'(authorization["\s]*[:=]["\s]*["\']?)(?!bearer\s)([a-zA-Z0-9+/=_\-.]{8,})',
                re.IGNORECASE,
            ),
            # Passwords
            re.compile(
                r'(password|passwd|pwd)["\s]*[:=]["\s]*([^\s"\'&]+)', re.IGNORECASE
            ),
            # URLs with credentials
            re.compile(r"(https?://[^:/\s]+):([^@/\s]+)@", re.IGNORECASE),
        ]

        self.replacements = [
            r"\1=***MASKED***",  # API keys and tokens
            r"\1***MASKED***",  # Bearer tokens
            r"\1***MASKED***",  # Authorization headers
            r"\1=***MASKED***",  # Passwords
            r"\1:***MASKED***@",  # URL credentials
        ]

    def mask(self, message: str) -> str:
        """Apply every masking pattern to message."""
        for pattern, replacement in zip(self.patterns, self.replacements):
            message = pattern.sub(replacement, message)
        return message

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record to mask sensitive data."""
        masked = self.mask(record.getMessage())
        record.msg = masked
        record.args = ()
        return True
