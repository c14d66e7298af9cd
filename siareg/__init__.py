"""
siareg: search the SIA public register of licence holders.

    >>> from siareg import Query, search_sync
    >>> search_sync(Query().with_license_no("1234567890123456"))
"""

from siareg.contexts.registry import License, Query, Role, Sector
from siareg.contexts.scraping import search, search_sync
from siareg.contexts.scraping.errors import (
    DispatchError,
    EmptyQueryError,
    NoLicenseContainersFound,
    NoLicensesFound,
    ParseError,
    RecordUnparseable,
    RegisterError,
    ServerRejected,
    TooManyResults,
    TransportError,
    TransportFailed,
)

__all__ = [
    "License",
    "Query",
    "Role",
    "Sector",
    "search",
    "search_sync",
    "RegisterError",
    "TransportError",
    "EmptyQueryError",
    "DispatchError",
    "TransportFailed",
    "ServerRejected",
    "ParseError",
    "NoLicensesFound",
    "TooManyResults",
    "NoLicenseContainersFound",
    "RecordUnparseable",
]
