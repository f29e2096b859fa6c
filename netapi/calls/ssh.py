"""
salt-ssh connection options.

These are passed through to the ssh client unchanged; only options that
are set end up in the request.
"""

from dataclasses import dataclass, fields
from typing import Any

# Field name -> option name understood by the ssh client.
_OPTION_NAMES = {
    "roster": "roster",
    "roster_file": "roster_file",
    "user": "ssh_user",
    "passwd": "ssh_passwd",
    "priv": "ssh_priv",
    "port": "ssh_port",
    "sudo": "ssh_sudo",
    "sudo_user": "ssh_sudo_user",
    "timeout": "ssh_timeout",
    "identities_only": "ssh_identities_only",
    "ignore_host_keys": "ignore_host_keys",
    "no_host_keys": "no_host_keys",
    "key_deploy": "ssh_key_deploy",
    "refresh_cache": "refresh_cache",
    "max_procs": "ssh_max_procs",
    "wipe": "ssh_wipe",
    "raw_shell": "raw_shell",
    "extra_filerefs": "extra_filerefs",
    "remote_port_forwards": "ssh_remote_port_forwards",
}


@dataclass(frozen=True)
class SSHConfig:
    """Options for calls made through the ssh client."""

    roster: str | None = None
    roster_file: str | None = None
    user: str | None = None
    passwd: str | None = None
    priv: str | None = None
    port: int | None = None
    sudo: bool | None = None
    sudo_user: str | None = None
    timeout: int | None = None
    identities_only: bool | None = None
    ignore_host_keys: bool | None = None
    no_host_keys: bool | None = None
    key_deploy: bool | None = None
    refresh_cache: bool | None = None
    max_procs: int | None = None
    wipe: bool | None = None
    raw_shell: bool | None = None
    extra_filerefs: str | None = None
    remote_port_forwards: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                payload[_OPTION_NAMES[f.name]] = value
        return payload

    def __repr__(self) -> str:
        shown = {k: v for k, v in self.to_payload().items() if k != "ssh_passwd"}
        return f"SSHConfig({shown!r})"
