from __future__ import annotations

from tempbridge._api.login import build_login_request
from tempbridge._crypto.signing import hmac_sha256_base64, sign_authorization
from tempbridge.config import EwelinkConfig


def test_hmac_sha256_base64_known_vector() -> None:
    digest = hmac_sha256_base64("The quick brown fox jumps over the lazy dog", "key")

    assert digest == "97yD9DBThCSxMpjmqm+xQ+9NWaFJRhdZl0edvC0aPNg="


def test_sign_authorization_accepts_bytes() -> None:
    assert sign_authorization(b"payload", "secret") == sign_authorization("payload", "secret")
    assert sign_authorization("payload", "secret").startswith("Sign ")


def test_login_request_body_is_compact_and_signed() -> None:
    config = EwelinkConfig(app_id="id", app_secret="secret", account="a@b.c", password="pw")

    body, headers = build_login_request(config)

    assert body == '{"countryCode":"+1","password":"pw","email":"a@b.c"}'
    assert headers["Authorization"] == "Sign 9lJe1yVpYN9z9NWIrv7tWeJxzmL7luSv0GFr7YEsSIM="
