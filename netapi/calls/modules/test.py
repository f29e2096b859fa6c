"""
The "test" execution module.
"""

from typing import Any

from netapi.calls.local_call import LocalCall


def ping() -> LocalCall[bool]:
    """Check that minions respond; each returns True."""
    return LocalCall("test.ping", return_type=bool)


def echo(text: str) -> LocalCall[str]:
    return LocalCall("test.echo", arg=[text], return_type=str)


def version() -> LocalCall[str]:
    return LocalCall("test.version", return_type=str)


def versions_information() -> LocalCall[dict[str, dict[str, Any]]]:
    return LocalCall("test.versions_information", return_type=dict[str, dict[str, Any]])
