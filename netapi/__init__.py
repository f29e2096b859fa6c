"""
netapi - typed client for the Salt API.

Describe a call once, run it synchronously, as a background job, in
batches or over salt-ssh, and get results decoded against the declared
return type:

    from netapi import Glob, LocalCall, NetApiClient

    with NetApiClient("https://salt.example.com:8000") as client:
        client.login("admin", "secret")
        LocalCall("test.ping", return_type=bool).call_sync(client, Glob("*"))
"""

from netapi.calls import (
    AuthModule,
    Batch,
    Credentials,
    Glob,
    LocalCall,
    MinionList,
    SSHConfig,
    TokenAuth,
)
from netapi.client import NetApiClient
from netapi.core.exceptions import AuthError, DecodeError, NetApiError, TransportError, ValidationError
from netapi.results import AsyncJobHandle, Err, Ok, Result, SSHResult

__version__ = "0.1.0"

__all__ = [
    "AsyncJobHandle",
    "AuthError",
    "AuthModule",
    "Batch",
    "Credentials",
    "DecodeError",
    "Err",
    "Glob",
    "LocalCall",
    "MinionList",
    "NetApiClient",
    "NetApiError",
    "Ok",
    "Result",
    "SSHConfig",
    "SSHResult",
    "TokenAuth",
    "TransportError",
    "ValidationError",
]
