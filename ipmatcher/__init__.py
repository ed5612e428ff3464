"""In-memory IPv4 network membership matcher."""

from ipmatcher.core.errors import InvalidAddressError, IpMatcherError
from ipmatcher.models import NetworkEntry
from ipmatcher.services.matcher import Matcher

__version__ = "0.1.0"

__all__ = [
    "InvalidAddressError",
    "IpMatcherError",
    "Matcher",
    "NetworkEntry",
]
