"""Delivery of readings to the ingestion endpoint."""

from tempbridge.delivery.coordinator import DeliveryCoordinator
from tempbridge.delivery.sink import DeliverySink, TandemSink, encode_records

__all__ = [
    "DeliveryCoordinator",
    "DeliverySink",
    "TandemSink",
    "encode_records",
]
