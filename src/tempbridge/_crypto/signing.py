"""Request signing for the eWeLink v2 API.

Login requests are authenticated with an HMAC-SHA256 of the exact request
body, keyed with the developer application secret.
"""

from __future__ import annotations

import base64

from cryptography.hazmat.primitives import hashes, hmac


def hmac_sha256_base64(message: str | bytes, secret: str) -> str:
    """Compute ``base64(HMAC-SHA256(secret, message))``.

    Parameters
    ----------
    message : str or bytes
        The payload to sign. Strings are UTF-8 encoded.
    secret : str
        The signing key.

    Returns
    -------
    str
        Standard base64 encoding of the 32-byte digest.
    """
    data = message.encode("utf-8") if isinstance(message, str) else message
    mac = hmac.HMAC(secret.encode("utf-8"), hashes.SHA256())
    mac.update(data)
    return base64.b64encode(mac.finalize()).decode("ascii")


def sign_authorization(body: str | bytes, app_secret: str) -> str:
    """Build the ``Authorization`` header value for a signed request."""
    return f"Sign {hmac_sha256_base64(body, app_secret)}"
