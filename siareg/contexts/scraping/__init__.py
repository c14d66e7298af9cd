"""
Register scraping domain.

Handles sending searches to the public register and extracting license records
from the result pages.
"""

from siareg.contexts.scraping.requests import (
    HttpxTransport,
    RequestsTransport,
    dispatch,
    dispatch_async,
)
from siareg.contexts.scraping.parsing import (
    assemble_record,
    assemble_records,
    classify_response,
    select_first,
)
from siareg.contexts.scraping.orchestration import (
    search,
    search_sync,
)

__all__ = [
    "HttpxTransport",
    "RequestsTransport",
    "dispatch",
    "dispatch_async",
    "assemble_record",
    "assemble_records",
    "classify_response",
    "select_first",
    "search",
    "search_sync",
]
