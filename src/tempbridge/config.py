"""Bridge configuration for tempbridge."""

from __future__ import annotations

import dataclasses
import math
import os
from collections.abc import Mapping
from typing import Any

from tempbridge._constants import (
    DEFAULT_AREA_CODE,
    DEFAULT_REGION,
    DEFAULT_STATE_FILE,
    DEFAULT_THRESHOLD,
    REGION_BASE_URLS,
)
from tempbridge.exceptions import BridgeConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_value(env: Mapping[str, str], key: str) -> str | None:
    """Return the variable, treating blank values as unset."""
    val = env.get(key)
    if val is None or not val.strip():
        return None
    return val


def _collect(env: Mapping[str, str], mapping: dict[str, str]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    for env_key, field_name in mapping.items():
        val = _env_value(env, env_key)
        if val is not None:
            kwargs[field_name] = val
    return kwargs


def _require(kwargs: dict[str, Any], mapping: dict[str, str], required: tuple[str, ...]) -> None:
    by_field = {field_name: env_key for env_key, field_name in mapping.items()}
    missing = [by_field[name] for name in required if not kwargs.get(name)]
    if missing:
        raise BridgeConfigError(f"Missing required environment variables: {', '.join(missing)}")


_ENV_EWELINK_MAP = {
    "EWL_APP_ID": "app_id",
    "EWL_APP_SECRET": "app_secret",
    "EWL_EMAIL": "account",
    "EWL_PASSWORD": "password",
    "EWL_REGION": "region",
    "EWL_AREACODE": "area_code",
}

_ENV_TANDEM_MAP = {
    "TANDEM_URL": "url",
    "TANDEM_BASIC": "basic_token",
    "TANDEM_SIGNAL_ID": "signal_id",
}


@dataclasses.dataclass(frozen=True)
class EwelinkConfig:
    """Credentials for the eWeLink cloud.

    Parameters
    ----------
    app_id : str
        Developer application id (sent as ``X-CK-Appid``).
    app_secret : str
        Developer application secret, used to sign the login body.
    account : str
        Account email, or phone number when it contains no ``@``.
    password : str
        Account password.
    region : str
        API region (``us``, ``eu``, ``as`` or ``cn``).
    area_code : str
        Country calling code of the account (e.g. ``"+1"``).
    """

    app_id: str
    app_secret: str
    account: str
    password: str
    region: str = DEFAULT_REGION
    area_code: str = DEFAULT_AREA_CODE

    @classmethod
    def from_env(cls, **overrides: Any) -> EwelinkConfig:
        """Create configuration from ``EWL_*`` environment variables."""
        kwargs = _collect(os.environ, _ENV_EWELINK_MAP)
        kwargs.update(overrides)
        _require(kwargs, _ENV_EWELINK_MAP, ("app_id", "app_secret", "account", "password"))
        region = str(kwargs.get("region", DEFAULT_REGION)).strip().lower()
        if region not in REGION_BASE_URLS:
            raise BridgeConfigError(f"EWL_REGION must be one of {sorted(REGION_BASE_URLS)}, got {region!r}")
        kwargs["region"] = region
        return cls(**kwargs)


@dataclasses.dataclass(frozen=True)
class TandemConfig:
    """Ingestion endpoint settings.

    ``basic_token`` is the already-encoded credential placed after
    ``Basic`` in the ``Authorization`` header.
    """

    url: str
    basic_token: str
    signal_id: str

    @classmethod
    def from_env(cls, **overrides: Any) -> TandemConfig:
        """Create configuration from ``TANDEM_*`` environment variables."""
        kwargs = _collect(os.environ, _ENV_TANDEM_MAP)
        kwargs.update(overrides)
        _require(kwargs, _ENV_TANDEM_MAP, ("url", "basic_token", "signal_id"))
        return cls(**kwargs)


@dataclasses.dataclass(frozen=True)
class BridgeConfig:
    """Top-level configuration for one bridge invocation.

    Parameters
    ----------
    ewelink : EwelinkConfig
        Sensor cloud credentials.
    tandem : TandemConfig
        Ingestion endpoint settings.
    device_id : str
        eWeLink device id of the temperature sensor.
    threshold : float
        Minimum absolute change (inclusive) that triggers a delivery.
    state_file : str
        Path of the file holding the last reported value.
    dry_run : bool
        Decide and log, but never deliver or persist.
    """

    ewelink: EwelinkConfig
    tandem: TandemConfig
    device_id: str
    threshold: float = DEFAULT_THRESHOLD
    state_file: str = DEFAULT_STATE_FILE
    dry_run: bool = False

    def __post_init__(self) -> None:
        if not math.isfinite(self.threshold) or self.threshold <= 0:
            raise BridgeConfigError(f"threshold must be a positive number, got {self.threshold}")

    @classmethod
    def from_env(cls, **overrides: Any) -> BridgeConfig:
        """Create configuration from environment variables.

        Reads the ``EWL_*`` and ``TANDEM_*`` groups plus ``EWL_DEVICE_ID``,
        ``TEMP_THRESHOLD``, ``STATE_FILE`` and ``BRIDGE_DRY_RUN``. Explicit
        keyword arguments override environment values.

        Raises
        ------
        BridgeConfigError
            If a required variable is missing or a value is malformed.
        """
        env = os.environ
        overrides = {k: v for k, v in overrides.items() if v is not None}

        ewelink = overrides.pop("ewelink", None)
        if isinstance(ewelink, dict) or ewelink is None:
            ewelink = EwelinkConfig.from_env(**(ewelink or {}))
        tandem = overrides.pop("tandem", None)
        if isinstance(tandem, dict) or tandem is None:
            tandem = TandemConfig.from_env(**(tandem or {}))

        config_kwargs: dict[str, Any] = {"ewelink": ewelink, "tandem": tandem}

        device_id = _env_value(env, "EWL_DEVICE_ID")
        if device_id is not None:
            config_kwargs["device_id"] = device_id

        threshold_env = _env_value(env, "TEMP_THRESHOLD")
        if threshold_env is not None and "threshold" not in overrides:
            try:
                config_kwargs["threshold"] = float(threshold_env)
            except ValueError as exc:
                raise BridgeConfigError(f"TEMP_THRESHOLD is not a number: {threshold_env!r}") from exc

        state_file = _env_value(env, "STATE_FILE")
        if state_file is not None:
            config_kwargs["state_file"] = state_file

        if "dry_run" not in overrides:
            config_kwargs["dry_run"] = _env_bool(_env_value(env, "BRIDGE_DRY_RUN"), False)

        config_kwargs.update(overrides)

        if not config_kwargs.get("device_id"):
            raise BridgeConfigError("Missing required environment variables: EWL_DEVICE_ID")

        return cls(**config_kwargs)
