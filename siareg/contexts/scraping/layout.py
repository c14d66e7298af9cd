"""
Page layout of the register's results page.

Everything that depends on the site's markup lives here: the sentinel phrases
and the CSS paths to each field inside a result card. A layout change on the
site should only require editing this table.
"""

NO_RESULTS_SENTINEL = "No results found"
TOO_MANY_RESULTS_SENTINEL = "Too many search results"

CONTAINER_SELECTOR = "div[class*='well']"

# Paths are relative to the card's own inner HTML (rows > columns > groups)
FIELD_SELECTORS = {
    "first_name": "div:nth-of-type(1) > div:nth-of-type(1) > div > div",
    "last_name": "div:nth-of-type(1) > div:nth-of-type(2) > div > div",
    "license_number": "div:nth-of-type(2) > div:nth-of-type(1) > div > div",
    "role": "div:nth-of-type(2) > div:nth-of-type(2) > div > div",
    "sector": "div:nth-of-type(2) > div:nth-of-type(3) > div > div",
    "expiry": "div:nth-of-type(3) > div:nth-of-type(1) > div > div",
    "status": "div:nth-of-type(3) > div:nth-of-type(2) > div > span:nth-of-type(1)",
    "status_reason": "div:nth-of-type(4) > div > div:nth-of-type(2) > span:nth-of-type(1)",
    "license_conditions": "div:nth-of-type(5) > div > div:nth-of-type(2)",
}

# Expiry dates read "01 January 2026". Month names are matched against this
# table rather than strptime("%B"), which follows the process locale.
EXPIRY_MONTHS = {
    name: number
    for number, full in enumerate(
        [
            "january", "february", "march", "april", "may", "june",
            "july", "august", "september", "october", "november", "december",
        ],
        start=1,
    )
    for name in (full, full[:3])
}
EXPIRY_MONTHS["sept"] = 9
