"""
Salt API client: dispatcher, HTTP transport and JSON codec.
"""

from netapi.client.client import NetApiClient
from netapi.client.codec import Codec, JsonCodec
from netapi.client.transport import HttpTransport, Transport

__all__ = ["Codec", "HttpTransport", "JsonCodec", "NetApiClient", "Transport"]
