"""
Decoded result types.
"""

from netapi.results.envelope import Envelope
from netapi.results.job import AsyncJobHandle
from netapi.results.result import Err, Ok, Result, SaltError, SSHResult
from netapi.results.session import Stats, Token

__all__ = [
    "AsyncJobHandle",
    "Envelope",
    "Err",
    "Ok",
    "Result",
    "SSHResult",
    "SaltError",
    "Stats",
    "Token",
]
