"""Login endpoint.

Endpoint:
  - /v2/user/login
"""

from __future__ import annotations

import json
import logging
from typing import Any

from tempbridge._api._common import error_code, response_data
from tempbridge._constants import LOGIN_ENDPOINT, REGION_BASE_URLS, REGION_REDIRECT_CODE
from tempbridge._crypto.signing import sign_authorization
from tempbridge._redact import redact_for_log
from tempbridge.config import EwelinkConfig
from tempbridge.exceptions import SourceAuthenticationError
from tempbridge.models.token import AuthToken

_logger = logging.getLogger(__name__)


def build_login_request(config: EwelinkConfig) -> tuple[str, dict[str, str]]:
    """Build the signed login body and headers.

    Parameters
    ----------
    config : EwelinkConfig
        Account credentials.

    Returns
    -------
    tuple[str, dict]
        ``(body, headers)``. The body must be sent byte-for-byte as
        returned because the ``Authorization`` header signs it.
    """
    payload: dict[str, str] = {
        "countryCode": config.area_code,
        "password": config.password,
    }
    if "@" in config.account:
        payload["email"] = config.account
    else:
        payload["phoneNumber"] = config.account

    body = json.dumps(payload, separators=(",", ":"))
    headers = {
        "Content-Type": "application/json",
        "X-CK-Appid": config.app_id,
        "Authorization": sign_authorization(body, config.app_secret),
    }
    return body, headers


def redirect_region(body: dict[str, Any]) -> str | None:
    """Return the region to retry in when the account lives elsewhere."""
    if error_code(body) != REGION_REDIRECT_CODE:
        return None
    region = response_data(body).get("region")
    if isinstance(region, str) and region.lower() in REGION_BASE_URLS:
        return region.lower()
    return None


def parse_login_response(body: dict[str, Any], region: str) -> AuthToken:
    """Parse the login envelope and extract the tokens.

    Parameters
    ----------
    body : dict
        Decoded login response.
    region : str
        Region the request was sent to; used when the response omits one.

    Raises
    ------
    SourceAuthenticationError
        If login failed or the response carries no access token.
    """
    code = error_code(body)
    if code != "0":
        raise SourceAuthenticationError(
            f"Login failed: error={code} msg={body.get('msg', '')}",
            code=code,
            endpoint=LOGIN_ENDPOINT,
        )

    data = response_data(body)
    _logger.debug("Login data parsed=%s", redact_for_log(data))

    access_token = data.get("at")
    if not isinstance(access_token, str) or not access_token:
        raise SourceAuthenticationError(
            "Login response missing access token",
            endpoint=LOGIN_ENDPOINT,
        )

    reported_region = data.get("region")
    return AuthToken(
        access_token=access_token,
        region=reported_region.lower() if isinstance(reported_region, str) and reported_region else region,
    )
