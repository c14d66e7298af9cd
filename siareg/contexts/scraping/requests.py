"""HTTP helpers for talking to the register: transports and the backoff dispatcher."""

import asyncio
import time
from typing import Awaitable, Callable, Dict, Generator, List, Optional, Protocol, Tuple

import httpx
import requests
from bs4 import Tag
from loguru import logger
from omegaconf import DictConfig

from siareg.contexts.scraping.config import load_fetch_config
from siareg.contexts.scraping.errors import ServerRejected, TransportError, TransportFailed
from siareg.contexts.scraping.parsing import classify_response

FormFields = Dict[str, str]
Outcome = Tuple[int, str]


class Transport(Protocol):
    def post_form(self, url: str, fields: FormFields) -> Outcome: ...


class AsyncTransport(Protocol):
    async def post_form(self, url: str, fields: FormFields) -> Outcome: ...


class RequestsTransport:
    """Blocking transport on top of a requests.Session."""

    def __init__(self, session=None, timeout: float = 30.0, user_agent: Optional[str] = None):
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        if self._owns_session and user_agent:
            self.session.headers["User-Agent"] = user_agent

    def post_form(self, url: str, fields: FormFields) -> Outcome:
        try:
            response = self.session.post(url, data=fields, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(str(e)) from e
        return response.status_code, response.text

    def close(self):
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class HttpxTransport:
    """
    Async transport on top of an httpx.AsyncClient.

    A client built here follows redirects, as requests.Session does for
    RequestsTransport. A caller-supplied client is used as configured.
    """

    def __init__(self, client=None, timeout: float = 30.0, user_agent: Optional[str] = None):
        self._owns_client = client is None
        if client is None:
            headers = {"User-Agent": user_agent} if user_agent else None
            client = httpx.AsyncClient(
                timeout=httpx.Timeout(timeout), headers=headers, follow_redirects=True
            )
        self.client = client

    async def post_form(self, url: str, fields: FormFields) -> Outcome:
        try:
            response = await self.client.post(url, data=fields)
        except httpx.RequestError as e:
            raise TransportError(str(e)) from e
        return response.status_code, response.text

    async def aclose(self):
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()


# Step yielded by _attempts when it wants the request sent
_SEND = object()


def _attempts(
    url: str, initial_delay: float, ceiling: float
) -> Generator[object, Optional[Outcome], str]:
    """
    Retry schedule for one request, independent of how sending and sleeping happen.

    Yields _SEND when a request should be made (the driver sends back
    (status, body), or throws TransportError in), and a float when the driver
    should wait that many seconds. Returns the body of the first 2xx response.

    Each failure doubles the delay. Before sleeping we check whether the total
    wait would pass the ceiling; if so, the failure is raised instead. With the
    defaults (1s, ceiling 8s) that means 4 attempts with 1, 2 and 4 second waits.

    Raises:
        TransportFailed: Last attempt failed at the network level
        ServerRejected: Last attempt got a non-2xx status
    """
    delay = initial_delay
    waited = 0.0
    attempt = 0

    while True:
        attempt += 1
        logger.debug(f"POST {url} (attempt {attempt})")

        try:
            status, body = yield _SEND
        except TransportError as e:
            logger.warning(f"Error: {e}")
            failure = TransportFailed(url, attempt, e)
        else:
            if 200 <= status < 300:
                return body
            logger.error(f"Request failed with status code: {status}")
            failure = ServerRejected(url, attempt, status)

        if waited + delay > ceiling:
            logger.error(f"Failed to make request after {attempt} attempts.")
            raise failure

        logger.debug(f"Retrying in {delay}s...")
        yield delay
        waited += delay
        delay *= 2


def _run_blocking(steps, send: Callable[[], Outcome], sleep: Callable[[float], None]) -> str:
    try:
        step = next(steps)
        while True:
            if step is _SEND:
                try:
                    outcome = send()
                except TransportError as e:
                    step = steps.throw(e)
                else:
                    step = steps.send(outcome)
            else:
                sleep(step)
                step = next(steps)
    except StopIteration as finished:
        return finished.value


async def _run_async(
    steps, send: Callable[[], Awaitable[Outcome]], sleep: Callable[[float], Awaitable[None]]
) -> str:
    try:
        step = next(steps)
        while True:
            if step is _SEND:
                try:
                    outcome = await send()
                except TransportError as e:
                    step = steps.throw(e)
                else:
                    step = steps.send(outcome)
            else:
                await sleep(step)
                step = next(steps)
    except StopIteration as finished:
        return finished.value


def _classify(body: str, config: DictConfig) -> List[Tag]:
    return classify_response(
        body,
        no_results_sentinel=config.sentinels.no_results,
        too_many_results_sentinel=config.sentinels.too_many_results,
    )


def dispatch(
    url: str,
    fields: FormFields,
    transport: Transport,
    *,
    sleep: Callable[[float], None] = time.sleep,
    config: Optional[DictConfig] = None,
) -> List[Tag]:
    """
    POST a search form, retrying with exponential backoff, and classify the page.

    Args:
        url: Register endpoint
        fields: Form fields to send urlencoded
        transport: Something with post_form(url, fields) -> (status, body)
        sleep: Blocking sleep used between attempts (default: time.sleep)
        config: Fetch config (default: load_fetch_config())

    Returns:
        List of result card elements

    Raises:
        TransportFailed, ServerRejected: Retries exhausted
        ParseError subclasses: From classify_response, never retried
    """
    if config is None:
        config = load_fetch_config()

    steps = _attempts(url, config.initial_delay, config.backoff_ceiling)
    body = _run_blocking(steps, lambda: transport.post_form(url, fields), sleep)
    return _classify(body, config)


async def dispatch_async(
    url: str,
    fields: FormFields,
    transport: AsyncTransport,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    config: Optional[DictConfig] = None,
) -> List[Tag]:
    """Same as dispatch(), but suspends instead of blocking while waiting."""
    if config is None:
        config = load_fetch_config()

    steps = _attempts(url, config.initial_delay, config.backoff_ceiling)
    body = await _run_async(steps, lambda: transport.post_form(url, fields), sleep)
    return _classify(body, config)
