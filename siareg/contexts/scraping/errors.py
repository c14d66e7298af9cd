"""
Exceptions raised while querying and parsing the register.

Parse errors carry a `recoverable` flag: "no results" and "too many results"
are valid (empty) answers, the rest mean the site's layout has changed.
"""

from typing import Optional

# Re-exported so the whole hierarchy can be imported from here
from siareg.contexts.registry.errors import EmptyQueryError, RegisterError


class TransportError(RegisterError):
    """Network-level failure (connection, DNS, timeout) raised by a transport."""


class DispatchError(RegisterError):
    def __init__(self, message: str, url: str, attempts: int):
        super().__init__(message)
        self.url = url
        self.attempts = attempts


class TransportFailed(DispatchError):
    def __init__(self, url: str, attempts: int, error: Optional[Exception] = None):
        super().__init__(
            f"Request to {url} failed after {attempts} attempts: {error}", url, attempts
        )
        self.error = error
        self.__cause__ = error


class ServerRejected(DispatchError):
    def __init__(self, url: str, attempts: int, status: int):
        super().__init__(
            f"Request to {url} rejected with status {status} after {attempts} attempts",
            url,
            attempts,
        )
        self.status = status


class ParseError(RegisterError):
    recoverable = False


class NoLicensesFound(ParseError):
    recoverable = True


class TooManyResults(ParseError):
    recoverable = True


class NoLicenseContainersFound(ParseError):
    pass


class RecordUnparseable(ParseError):
    pass
