class RefreshError(Exception):
    """Base class for failures the refresh pipeline knows how to report."""


class SourceUnavailable(RefreshError):
    """An upstream source timed out, was unreachable or answered badly."""

    def __init__(self, source, reason=""):
        self.source = source
        self.reason = reason
        message = f"Could not fetch data from {source}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

    @property
    def details(self):
        return f"Could not fetch data from {self.source}"


class RecordInvalid(RefreshError):
    """A raw country record failed validation.

    ``errors`` maps the failing field to a single message, e.g.
    ``{"population": "must be at least 0"}``.
    """

    def __init__(self, errors):
        self.errors = dict(errors)
        super().__init__(", ".join(f"{k}: {v}" for k, v in self.errors.items()))


class RenderError(RefreshError):
    """The summary image could not be produced or written."""
