"""
The "grains" execution module.
"""

from typing import Any

from netapi.calls.local_call import LocalCall


def items() -> LocalCall[dict[str, Any]]:
    return LocalCall("grains.items", return_type=dict[str, Any])


def item(*keys: str) -> LocalCall[dict[str, Any]]:
    return LocalCall("grains.item", arg=list(keys), return_type=dict[str, Any])


def get(key: str) -> LocalCall[Any]:
    return LocalCall("grains.get", arg=[key], return_type=Any)
