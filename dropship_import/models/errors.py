# dropship_import/models/errors.py

"""Document-level failures surfaced to pipeline callers.

Field-level extraction misses never raise; they are logged and the field
is left for the merger to default. Only the errors below reach a caller,
and ``str(error)`` is always a short, user-facing reason.
"""


class ExtractionError(Exception):
    """Base class for every failure a pipeline reports to its caller."""


class InvalidURLError(ExtractionError):
    """The input is not an absolute http(s) URL. No fetch was made."""


class UnsupportedSourceError(ExtractionError):
    """The host is outside the marketplaces a pipeline accepts."""


class FetchFailedError(ExtractionError):
    """Every retrieval endpoint failed to return usable content."""


class InternalError(ExtractionError):
    """An unexpected exception escaped extraction, merge or synthesis."""
