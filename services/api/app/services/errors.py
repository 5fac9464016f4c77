"""Service-level exceptions.

Only ValidationError ever reaches an HTTP client. Fetch/parse failures are
contained at the aggregator boundary and persistence failures are logged.
"""


class InstantProofError(RuntimeError):
    pass


class FetchError(InstantProofError):
    """A mention source could not be reached or answered with a non-2xx status."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class ParseError(FetchError):
    """A mention source answered with a body that is not the expected JSON shape."""


class PersistenceError(InstantProofError):
    pass


class ValidationError(InstantProofError):
    """Rejected user input, raised before any network or store work."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message
