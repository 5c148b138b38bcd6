"""Client wrappers for external services."""

from core.clients.gps51 import GpsProviderClient
from core.clients.nominatim import NominatimClient

__all__ = [
    "GpsProviderClient",
    "NominatimClient",
]
