"""
Search orchestration: query → request → page classification → records.

Provides the two public entry points:
- search: for asyncio callers (waits between retries without blocking the loop)
- search_sync: for plain blocking callers

Both run the same dispatch/classify/assemble chain. "No results" and "too many
results" pages come back as an empty list; everything else that goes wrong is
raised.
"""

import asyncio
import time
from typing import List, Optional, Tuple

from loguru import logger
from omegaconf import DictConfig

from siareg.contexts.registry.diagnostics import DiagnosticsSink
from siareg.contexts.registry.models import License
from siareg.contexts.scraping.config import load_fetch_config
from siareg.contexts.scraping.errors import NoLicensesFound, TooManyResults
from siareg.contexts.scraping.parsing import assemble_records
from siareg.contexts.scraping.requests import (
    FormFields,
    HttpxTransport,
    RequestsTransport,
    dispatch,
    dispatch_async,
)


def _prepare(query, config: DictConfig) -> Tuple[str, FormFields]:
    """Pick the endpoint and form fields for a query (raises EmptyQueryError)."""
    payload = query.to_payload()
    url = config[payload.endpoint_key]
    logger.debug(f"Searching with {type(payload).__name__}: {payload}")
    return url, payload.to_params()


def _empty_result(error: Exception) -> List[License]:
    if isinstance(error, TooManyResults):
        logger.debug("Too many search results, narrow the query.")
    else:
        logger.debug("No licenses found.")
    return []


async def search(
    query,
    *,
    transport=None,
    config: Optional[DictConfig] = None,
    diagnostics: Optional[DiagnosticsSink] = None,
    sleep=asyncio.sleep,
) -> List[License]:
    """
    Search the public register.

    Args:
        query: A Query with at least one field set
        transport: Async transport to use (default: a fresh HttpxTransport per call)
        config: Fetch config (default: load_fetch_config())
        diagnostics: Sink for data-quality anomalies (default: loguru warnings)
        sleep: Coroutine function used to wait between retries

    Returns:
        Licenses in the order the register lists them (empty if none matched
        or the query was too broad)

    Raises:
        EmptyQueryError: The query has no fields set
        TransportFailed, ServerRejected: The register couldn't be reached
        NoLicenseContainersFound, RecordUnparseable: The page layout has changed
    """
    if config is None:
        config = load_fetch_config()
    url, fields = _prepare(query, config)

    try:
        if transport is None:
            async with HttpxTransport(
                timeout=config.timeout, user_agent=config.user_agent
            ) as owned_transport:
                containers = await dispatch_async(
                    url, fields, owned_transport, sleep=sleep, config=config
                )
        else:
            containers = await dispatch_async(url, fields, transport, sleep=sleep, config=config)
    except (NoLicensesFound, TooManyResults) as e:
        return _empty_result(e)

    return assemble_records(containers, diagnostics=diagnostics)


def search_sync(
    query,
    *,
    transport=None,
    config: Optional[DictConfig] = None,
    diagnostics: Optional[DiagnosticsSink] = None,
    sleep=time.sleep,
) -> List[License]:
    """
    Blocking version of search(). Retry waits block the calling thread.

    Takes the same arguments as search(), with a blocking transport
    (default: a fresh RequestsTransport per call) and a blocking sleep.
    """
    if config is None:
        config = load_fetch_config()
    url, fields = _prepare(query, config)

    try:
        if transport is None:
            with RequestsTransport(
                timeout=config.timeout, user_agent=config.user_agent
            ) as owned_transport:
                containers = dispatch(url, fields, owned_transport, sleep=sleep, config=config)
        else:
            containers = dispatch(url, fields, transport, sleep=sleep, config=config)
    except (NoLicensesFound, TooManyResults) as e:
        return _empty_result(e)

    return assemble_records(containers, diagnostics=diagnostics)
