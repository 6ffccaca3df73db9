"""Authentication token model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AuthToken(BaseModel):
    """Token returned after a successful login.

    Parameters
    ----------
    access_token : str
        The ``at`` field of the login response.
    region : str
        Region reported by the server, or the region the login was sent to.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str
    region: str
