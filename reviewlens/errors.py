"""Exceptions raised by reviewlens."""


class ReviewLensError(Exception):
    """Base class for reviewlens errors."""

    pass


class MalformedDiffHeaderError(ReviewLensError, ValueError):
    """Raised when a hunk header's line numbers cannot be parsed."""

    def __init__(self, header: str, reason: str):
        self.header = header
        self.reason = reason
        super().__init__(f"Malformed hunk header {header!r}: {reason}")


class ConfigError(ReviewLensError):
    """Raised when resolver configuration is invalid."""

    pass
