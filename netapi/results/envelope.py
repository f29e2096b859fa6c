"""
The outermost response wrapper: {"return": [...]}.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Envelope(Generic[T]):
    """Decoded {"return": ...} body; value holds the decoded return list."""

    value: T
