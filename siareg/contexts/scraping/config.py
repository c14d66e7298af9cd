"""
Fetch configuration for the register client.

Defaults live here; CONFIG_PATH/fetch.yaml (if present) and explicit overrides
are merged on top with OmegaConf.
"""

import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

from siareg.contexts.scraping.layout import NO_RESULTS_SENTINEL, TOO_MANY_RESULTS_SENTINEL

load_dotenv()
CONFIG_PATH = Path(os.getenv("CONFIG_PATH", "config"))

SEARCH_LICENSE_NUM_URL = (
    "https://services.sia.homeoffice.gov.uk/PublicRegister/SearchPublicRegisterByLicence"
)
SEARCH_NAME_URL = (
    "https://services.sia.homeoffice.gov.uk/PublicRegister/SearchPublicRegisterBySurname"
)

DEFAULT_FETCH_CONFIG = {
    "search_license_url": SEARCH_LICENSE_NUM_URL,
    "search_name_url": SEARCH_NAME_URL,
    # Backoff in seconds: 1, 2, 4 are slept, a failure that would need 8 more gives up
    "initial_delay": 1.0,
    "backoff_ceiling": 8.0,
    "timeout": 30.0,
    "user_agent": "siareg/0.1",
    "sentinels": {
        "no_results": NO_RESULTS_SENTINEL,
        "too_many_results": TOO_MANY_RESULTS_SENTINEL,
    },
}


def load_fetch_config(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[dict] = None,
) -> DictConfig:
    """
    Build the fetch config.

    Args:
        config_path: YAML file to merge over the defaults
                     (default: CONFIG_PATH/fetch.yaml, skipped if missing)
        overrides: Values that take precedence over both

    Returns:
        DictConfig: Merged configuration object

    Raises:
        FileNotFoundError: If an explicitly given config_path doesn't exist
    """
    merged = OmegaConf.create(DEFAULT_FETCH_CONFIG)

    if config_path is not None:
        merged = OmegaConf.merge(merged, OmegaConf.load(config_path))
    elif (CONFIG_PATH / "fetch.yaml").exists():
        merged = OmegaConf.merge(merged, OmegaConf.load(CONFIG_PATH / "fetch.yaml"))

    if overrides:
        merged = OmegaConf.merge(merged, OmegaConf.create(overrides))

    return merged
