"""Internal constants shared across the library."""

USER_AGENT = "tempbridge/1 (+aiohttp)"

# ------------------------------------------------------------------
# eWeLink cloud
# ------------------------------------------------------------------

REGION_BASE_URLS: dict[str, str] = {
    "cn": "https://cn-apia.coolkit.cn",
    "as": "https://as-apia.coolkit.cc",
    "us": "https://us-apia.coolkit.cc",
    "eu": "https://eu-apia.coolkit.cc",
}
DEFAULT_REGION = "us"
DEFAULT_AREA_CODE = "+1"

LOGIN_ENDPOINT = "/v2/user/login"
THING_STATUS_ENDPOINT = "/v2/device/thing/status"

#: ``type`` query value for a single device in the thing-status endpoint.
THING_TYPE_DEVICE = 1

AUTH_ERROR_CODES: frozenset[str] = frozenset({"401", "402", "406", "407"})
REGION_REDIRECT_CODE = "10004"

# ------------------------------------------------------------------
# Change detection
# ------------------------------------------------------------------

DEFAULT_THRESHOLD = 0.2
DEFAULT_STATE_FILE = "last_temp.txt"


def base_url_for_region(region: str) -> str:
    """Return the eWeLink API base URL for *region*.

    Raises :class:`ValueError` for regions without a known endpoint.
    """
    key = region.strip().lower()
    url = REGION_BASE_URLS.get(key)
    if url is None:
        raise ValueError(f"region must be one of {sorted(REGION_BASE_URLS)}, got {region!r}")
    return url
