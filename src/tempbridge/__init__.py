"""tempbridge - forward meaningful eWeLink temperature changes to Tandem."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tempbridge")
except PackageNotFoundError:
    __version__ = "0+local"
from tempbridge.bridge import run_from_config, run_once
from tempbridge.client import EwelinkClient, SensorSource
from tempbridge.config import BridgeConfig, EwelinkConfig, TandemConfig
from tempbridge.delivery import DeliveryCoordinator, DeliverySink, TandemSink
from tempbridge.exceptions import (
    BridgeConfigError,
    BridgeError,
    BridgeTransportError,
    DeliveryError,
    ExtractionError,
    PersistenceError,
    SourceAuthenticationError,
    SourceError,
)
from tempbridge.ingestion import extract_reading
from tempbridge.models import (
    AuthToken,
    Decision,
    DeliveryOutcome,
    DeliveryRecord,
    DeliveryResult,
)
from tempbridge.session import Session
from tempbridge.state import FileReadingStore, MemoryReadingStore, ReadingStore, decide

__all__ = [
    "__version__",
    "AuthToken",
    "BridgeConfig",
    "BridgeConfigError",
    "BridgeError",
    "BridgeTransportError",
    "Decision",
    "DeliveryCoordinator",
    "DeliveryError",
    "DeliveryOutcome",
    "DeliveryRecord",
    "DeliveryResult",
    "DeliverySink",
    "EwelinkClient",
    "EwelinkConfig",
    "ExtractionError",
    "FileReadingStore",
    "MemoryReadingStore",
    "PersistenceError",
    "ReadingStore",
    "SensorSource",
    "Session",
    "SourceAuthenticationError",
    "SourceError",
    "TandemConfig",
    "TandemSink",
    "decide",
    "extract_reading",
    "run_from_config",
    "run_once",
]
