"""Clients for the provider's network configuration endpoints."""
from .base import NetworkConfigClient
from .management import ServiceManagementClient, OperationStatus

__all__ = [
    "NetworkConfigClient",
    "ServiceManagementClient",
    "OperationStatus",
]
