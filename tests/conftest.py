"""
Shared fixtures: register pages, fake transports and a recording diagnostics sink.

No test talks to the network or actually sleeps.
"""

import sys

import pytest
from loguru import logger

from siareg.contexts.scraping.config import load_fetch_config


def license_card(
    first_name="JOHN",
    last_name="SMITH",
    license_number="1234567890123456",
    role="Front Line",
    sector="Door Supervision",
    expiry="01 January 2026",
    status="Active",
    status_reason="",
    conditions="None",
):
    """One result card laid out the way the register renders it."""
    return f"""
<div class="panel panel-default well">
  <div class="row">
    <div class="col-md-6"><div class="form-group"><label>First name</label><div class="ax_h5">{first_name}</div></div></div>
    <div class="col-md-6"><div class="form-group"><label>Surname</label><div class="ax_h5">{last_name}</div></div></div>
  </div>
  <div class="row">
    <div class="col-md-4"><div class="form-group"><label>Licence number</label><div class="ax_h4">{license_number}</div></div></div>
    <div class="col-md-4"><div class="form-group"><label>Role</label><div class="ax_h5">{role}</div></div></div>
    <div class="col-md-4"><div class="form-group"><label>Licence sector</label><div class="ax_h5">{sector}</div></div></div>
  </div>
  <div class="row">
    <div class="col-md-4"><div class="form-group"><label>Expiry date</label><div class="ax_h5">{expiry}</div></div></div>
    <div class="col-md-4"><div class="form-group"><label>Status</label><span class="ax_h5_green">{status}</span></div></div>
  </div>
  <div class="row">
    <div class="col-md-12"><div class="col-label">Status reason</div><div class="col-value"><span>{status_reason}</span></div></div>
  </div>
  <div class="row">
    <div class="col-md-12"><div class="col-label">Licence conditions</div><div class="col-value">{conditions}</div></div>
  </div>
</div>
"""


def results_page(*cards):
    return (
        "<html><head><title>Public Register</title></head><body>"
        "<div class='container'><h2>Search results</h2>"
        + "".join(cards)
        + "</div></body></html>"
    )


NO_RESULTS_PAGE = (
    "<html><body><div class='container'><p class='text-danger'>No results found</p></div></body></html>"
)
TOO_MANY_RESULTS_PAGE = (
    "<html><body><div class='container'><p class='text-danger'>"
    "Too many search results, please refine your search</p></div></body></html>"
)
UNKNOWN_LAYOUT_PAGE = "<html><body><div class='container'><p>Service unavailable</p></div></body></html>"


class RecordingDiagnostics:
    def __init__(self):
        self.anomalies = []

    def record_anomaly(self, message, **context):
        self.anomalies.append((message, context))

    @property
    def messages(self):
        return [message for message, _ in self.anomalies]


class FakeTransport:
    """
    Blocking transport that replays scripted outcomes.

    Each outcome is either (status, body) or an exception instance to raise.
    """

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def post_form(self, url, fields):
        self.calls.append((url, dict(fields)))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class AsyncFakeTransport(FakeTransport):
    async def post_form(self, url, fields):
        return FakeTransport.post_form(self, url, fields)


class SleepRecorder:
    def __init__(self):
        self.delays = []

    def __call__(self, delay):
        self.delays.append(delay)


class AsyncSleepRecorder(SleepRecorder):
    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture
def diagnostics():
    return RecordingDiagnostics()


@pytest.fixture
def fetch_config():
    return load_fetch_config(
        overrides={
            "search_license_url": "https://register.test/ByLicence",
            "search_name_url": "https://register.test/BySurname",
            "initial_delay": 1.0,
            "backoff_ceiling": 8.0,
        }
    )


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def async_sleep_recorder():
    return AsyncSleepRecorder()


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)
