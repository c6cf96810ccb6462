"""huesync: device control and synchronization core for smart lighting bridges."""

__version__ = "0.1.0"

from .bridges import Bridge, BridgeRegistry
from .cache import DeviceCache
from .models import DeviceState
from .parsing import parse
from .variation import VariationEngine

__all__ = [
    "Bridge",
    "BridgeRegistry",
    "DeviceCache",
    "DeviceState",
    "VariationEngine",
    "parse",
]
