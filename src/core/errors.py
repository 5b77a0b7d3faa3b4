# src/core/errors.py


class DataFetchError(Exception):
    """Base error for every failure of the data-access layer."""


class RemoteQueryError(DataFetchError):
    """The backend (or the transport to it) reported a failure.

    The original exception is kept as ``__cause__``.
    """


class NotFound(DataFetchError):
    pass


class MultipleRows(DataFetchError):
    pass


class MalformedInput(DataFetchError, ValueError):
    """Invalid arguments, raised before any remote call is made."""
