"""Runtime configuration: storage paths, CMS limits, and WordPress credentials."""

import os
import re
from pathlib import Path
from typing import NamedTuple

DATA_DIR = Path(os.environ.get("SITEJOB_DATA_DIR", "data"))
PUBLISH_LOG_FILENAME = "website-job-publish.jsonl"

LOG_LEVEL = os.environ.get("SITEJOB_LOG_LEVEL", "INFO")

WP_API_TIMEOUT = 15  # seconds
WP_PAGE_SIZE = 100

# slowapi limit strings, per route group
PARSE_RATE_LIMIT = "30/minute"
JOB_RATE_LIMIT = "60/minute"
REMOTE_RATE_LIMIT = "10/minute"
PUBLISH_RATE_LIMIT = "5/minute"

# Brands whose environment prefix is not simply the upper-cased brand name
_BRAND_ENV_PREFIXES = {
    "llif": "LLIF",
    "bestlife": "BLA",
}


class WpCredentials(NamedTuple):
    base_url: str
    username: str
    app_password: str


def _env_prefix(brand: str) -> str:
    prefix = _BRAND_ENV_PREFIXES.get(brand.lower())
    if prefix:
        return prefix
    return re.sub(r"[^A-Z0-9]+", "_", brand.upper()).strip("_")


def get_wp_credentials(brand: str) -> WpCredentials:
    """Return the WordPress credentials configured for *brand*.

    Raises:
        ValueError: if the brand is blank or any of its variables is unset.
    """
    if not brand or not brand.strip():
        raise ValueError("A brand is required to resolve WordPress credentials.")

    prefix = _env_prefix(brand)
    names = (f"{prefix}_WP_BASE_URL", f"{prefix}_WP_USERNAME", f"{prefix}_WP_APP_PASSWORD")
    base_url, username, app_password = (os.environ.get(name, "") for name in names)

    if not base_url or not username or not app_password:
        raise ValueError(
            f"Missing WordPress credentials for brand '{brand}'. "
            f"Expected env vars: {', '.join(names)}"
        )

    return WpCredentials(base_url=base_url.rstrip("/"), username=username, app_password=app_password)
