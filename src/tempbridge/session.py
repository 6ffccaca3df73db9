"""Session state for authenticated eWeLink calls."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Session(BaseModel):
    """Authenticated session returned by :meth:`EwelinkClient.authenticate`.

    Parameters
    ----------
    access_token : str
        Bearer token for post-login requests.
    region : str
        Region the account actually lives in. May differ from the
        configured region after a login redirect.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    access_token: str
    region: str

    def bearer(self) -> str:
        return f"Bearer {self.access_token}"
