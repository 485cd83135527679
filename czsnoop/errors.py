"""
Exception hierarchy for czsnoop.

Every failure a search can end with derives from CzsnoopError, so callers
can catch one type and print its message.
"""


class CzsnoopError(Exception):
    """Base class for all czsnoop errors."""


class AmbiguousQueryError(CzsnoopError):
    """The register truncated a result set; the query must be narrowed."""

    def __init__(self, message: str = "too many possible matches, please provide more details"):
        super().__init__(message)


class RemoteFailureError(CzsnoopError):
    """Transport, decoding or unexpected-status failure talking to the register."""


class DataIntegrityError(CzsnoopError):
    """A record disagrees with its origin or a required field cannot be parsed."""


class DegradedEnrichmentError(CzsnoopError):
    """
    Optional enrichment could not be completed.

    Raised inside a single person task only; it is logged and never
    propagated to the caller of a search.
    """


class AddressNormalizationError(DegradedEnrichmentError):
    """A free-text address could not be converted to a searchable form."""


class SearchCancelledError(CzsnoopError):
    """
    A task noticed that its search was cancelled by another task's failure.

    The search surfaces the original cause, never this error.
    """
