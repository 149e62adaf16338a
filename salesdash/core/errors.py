class DashboardError(Exception):
    """Base class for failures the HTTP layer turns into JSON error envelopes."""


class ValidationError(DashboardError):
    """A caller-supplied parameter is outside its accepted domain."""


class QueryError(DashboardError):
    """A read or write against the sale store failed."""


class FetchError(DashboardError):
    """The seed feed could not be downloaded or decoded."""


__all__ = ["DashboardError", "FetchError", "QueryError", "ValidationError"]
