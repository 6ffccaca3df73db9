"""Cryptographic primitives for eWeLink API communication."""

from __future__ import annotations

from tempbridge._crypto.signing import hmac_sha256_base64, sign_authorization

__all__ = [
    "hmac_sha256_base64",
    "sign_authorization",
]
