"""
Extraction of license records from the register's results page.

Parsing happens in two steps:
1. classify_response: look for the "no results" / "too many results" phrases,
   otherwise find the result cards
2. assemble_record: pull the nine fields out of one card by position
"""

from datetime import date
from typing import Dict, List, Optional

from bs4 import BeautifulSoup, Tag
from loguru import logger

from siareg.contexts.registry.diagnostics import DiagnosticsSink, default_diagnostics
from siareg.contexts.registry.models import (
    EXPIRY_SENTINEL,
    License,
    classify_role,
    classify_sector,
)
from siareg.contexts.scraping.errors import (
    NoLicenseContainersFound,
    NoLicensesFound,
    RecordUnparseable,
    TooManyResults,
)
from siareg.contexts.scraping.layout import (
    CONTAINER_SELECTOR,
    EXPIRY_MONTHS,
    FIELD_SELECTORS,
    NO_RESULTS_SENTINEL,
    TOO_MANY_RESULTS_SENTINEL,
)
from siareg.utils.text_processing import normalize_text, vocabulary_key

HTML_PARSER = "html.parser"

# Human readable names used when reporting a missing field
_FIELD_LABELS = {
    "first_name": "first name",
    "last_name": "last name",
    "license_number": "license number",
    "role": "role",
    "sector": "sector",
    "expiry": "expiry date",
    "status": "status",
    "status_reason": "status reason",
    "license_conditions": "license conditions",
}


def select_first(fragment, selector: str) -> Optional[str]:
    """Text of the first element matching selector, or None if nothing matches."""
    element = fragment.select_one(selector)
    if element is None:
        return None
    return element.get_text()


def classify_response(
    body: str,
    *,
    no_results_sentinel: str = NO_RESULTS_SENTINEL,
    too_many_results_sentinel: str = TOO_MANY_RESULTS_SENTINEL,
) -> List[Tag]:
    """
    Decide what kind of page the register returned and find the result cards.

    Args:
        body: HTML of the results page
        no_results_sentinel: Phrase the site shows when nothing matched
        too_many_results_sentinel: Phrase the site shows when the query is too broad

    Returns:
        List of result card elements, in document order

    Raises:
        NoLicensesFound: The page says there are no results (recoverable)
        TooManyResults: The page asks for a narrower search (recoverable)
        NoLicenseContainersFound: No result cards found, the page layout is unknown
    """
    if no_results_sentinel in body:
        raise NoLicensesFound(no_results_sentinel)

    if too_many_results_sentinel in body:
        raise TooManyResults(too_many_results_sentinel)

    document = BeautifulSoup(body, HTML_PARSER)
    containers = document.select(CONTAINER_SELECTOR)

    if not containers:
        raise NoLicenseContainersFound(
            f"No elements matching {CONTAINER_SELECTOR!r} in a {len(body)} character page"
        )

    logger.debug(f"Found {len(containers)} license containers")
    return containers


def parse_expiry_date(text: str) -> date:
    """
    Parse a register expiry date such as "01 January 2026" (or "1 Jan 2026").

    Month names are English whatever the process locale is.

    Raises:
        ValueError: The text is not a day, month name and year, or not a real date
    """
    parts = text.split()
    if len(parts) != 3:
        raise ValueError(f"Expected day, month and year, got {text!r}")

    day, month_name, year = parts
    month = EXPIRY_MONTHS.get(month_name.lower())
    if month is None or not day.isdigit() or not year.isdigit():
        raise ValueError(f"Unrecognised expiry date {text!r}")
    return date(int(year), month, int(day))


def _parse_expiry(raw: Optional[str], diagnostics: DiagnosticsSink) -> date:
    if raw is None:
        return EXPIRY_SENTINEL

    text = normalize_text(raw)
    try:
        return parse_expiry_date(text)
    except ValueError:
        diagnostics.record_anomaly("Unable to parse expiry date", value=text)
        return EXPIRY_SENTINEL


def assemble_record(
    container: Tag,
    *,
    diagnostics: Optional[DiagnosticsSink] = None,
    selectors: Dict[str, str] = FIELD_SELECTORS,
) -> License:
    """
    Build a License from one result card.

    Missing fields become "" (and are reported); only a card where every field
    is missing is treated as a failure.

    Raises:
        RecordUnparseable: None of the fields could be found in the card
    """
    if diagnostics is None:
        diagnostics = default_diagnostics()

    # Re-parse the card on its own so positional paths can't match outside it
    fragment = BeautifulSoup(container.decode_contents(), HTML_PARSER)
    raw = {
        name: select_first(fragment, selectors[name]) if name in selectors else None
        for name in _FIELD_LABELS
    }

    if all(value is None for value in raw.values()):
        raise RecordUnparseable("Unable to parse license - none of the fields were found")

    for name, value in raw.items():
        if value is None:
            diagnostics.record_anomaly(f"Unable to find {_FIELD_LABELS[name]}")

    text = {name: normalize_text(value) for name, value in raw.items()}

    # A blank role cell maps to Role.UNKNOWN, which classify_role doesn't report
    if raw["role"] is not None and not vocabulary_key(text["role"]):
        diagnostics.record_anomaly("Empty license role", value=raw["role"])

    record = License(
        first_name=text["first_name"],
        last_name=text["last_name"],
        license_number=text["license_number"],
        role=classify_role(text["role"], diagnostics),
        sector=classify_sector(text["sector"], diagnostics),
        expiry=_parse_expiry(raw["expiry"], diagnostics),
        status=text["status"],
        status_reason=text["status_reason"],
        license_conditions=text["license_conditions"],
    )

    logger.debug(f"Parsed license: {record.license_number}")
    return record


def assemble_records(
    containers: List[Tag],
    *,
    diagnostics: Optional[DiagnosticsSink] = None,
    selectors: Dict[str, str] = FIELD_SELECTORS,
) -> List[License]:
    return [
        assemble_record(container, diagnostics=diagnostics, selectors=selectors)
        for container in containers
    ]
