"""
Defender platform clients.

One client per platform service, built on aiohttp.
"""

from clients.admin import AdminClient
from clients.autotask import AutotaskClient
from clients.base import DefenderAPIError, DefenderClient
from clients.relay import RelayClient
from clients.sentinel import SentinelClient

__all__ = [
    "AdminClient",
    "AutotaskClient",
    "DefenderAPIError",
    "DefenderClient",
    "RelayClient",
    "SentinelClient",
]
