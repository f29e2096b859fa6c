"""
Client Configuration.

Two layers:

- ClientConfig: the runtime key/value store threaded through every call
  (base URL, session token, timeouts, proxy). One instance per client.
- YAML settings: config/settings/client.yaml, used to build a ClientConfig
  for applications such as the CLI.

ClientConfig keeps its values in an immutable snapshot. Writers build a new
snapshot and swap the reference; readers never lock and see either the old
or the new snapshot in full, never a partially written token.
"""

import os
import threading
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Generic, Mapping, TypeVar

import yaml

T = TypeVar("T")

SETTINGS_DIR_ENV = "NETAPI_CONFIG_DIR"
PROJECT_ROOT_MARKER = ".project_root"


@dataclass(frozen=True)
class ConfigKey(Generic[T]):
    """Typed configuration key with a default value."""

    name: str
    default: T | None = None


URL: ConfigKey[str] = ConfigKey("url")
TOKEN: ConfigKey[str] = ConfigKey("token")
CONNECT_TIMEOUT: ConfigKey[float] = ConfigKey("connect_timeout", 10.0)
SOCKET_TIMEOUT: ConfigKey[float] = ConfigKey("socket_timeout", 20.0)
VERIFY_TLS: ConfigKey[bool] = ConfigKey("verify_tls", True)
PROXY_HOSTNAME: ConfigKey[str] = ConfigKey("proxy_hostname")
PROXY_PORT: ConfigKey[int] = ConfigKey("proxy_port", 3128)
PROXY_USERNAME: ConfigKey[str] = ConfigKey("proxy_username")
PROXY_PASSWORD: ConfigKey[str] = ConfigKey("proxy_password")


class ClientConfig:
    """
    Key/value configuration with atomic-replace writes.

    Usage:
        config = ClientConfig({URL: "https://salt.example.com:8000"})
        config.put(TOKEN, "f248284b...")
        config.get(SOCKET_TIMEOUT)  # 20.0 unless overridden
    """

    def __init__(self, values: Mapping[ConfigKey[Any], Any] | None = None):
        self._values: Mapping[str, Any] = MappingProxyType(
            {key.name: value for key, value in (values or {}).items()}
        )
        self._write_lock = threading.Lock()

    def get(self, key: ConfigKey[T]) -> T | None:
        """Return the value for key, or the key's default when unset."""
        return self._values.get(key.name, key.default)

    def put(self, key: ConfigKey[T], value: T) -> None:
        """Set key to value, replacing the whole snapshot."""
        with self._write_lock:
            updated = dict(self._values)
            updated[key.name] = value
            self._values = MappingProxyType(updated)

    def remove(self, key: ConfigKey[Any]) -> None:
        """Unset key. Removing an unset key is a no-op."""
        with self._write_lock:
            if key.name not in self._values:
                return
            updated = dict(self._values)
            del updated[key.name]
            self._values = MappingProxyType(updated)

    def contains(self, key: ConfigKey[Any]) -> bool:
        return key.name in self._values

    def snapshot(self) -> Mapping[str, Any]:
        """Return the current immutable view of all explicitly set values."""
        return self._values


@dataclass(frozen=True)
class ProxySettings:
    """HTTP proxy to use when connecting to the API."""

    hostname: str | None = None
    port: int = 3128
    username: str | None = None
    password: str | None = None


# =============================================================================
# YAML settings
# =============================================================================

_client_settings: dict[str, Any] | None = None


def find_project_root(start: Path | None = None) -> Path:
    """
    Find the directory holding the .project_root marker.

    Walks up from start (default: current directory). Falls back to the
    directory containing the netapi package when no marker is found.
    """
    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / PROJECT_ROOT_MARKER).exists():
            return candidate
    return Path(__file__).resolve().parent.parent.parent


def get_settings_dir() -> Path:
    """Settings directory: $NETAPI_CONFIG_DIR, else <project root>/config/settings."""
    override = os.environ.get(SETTINGS_DIR_ENV)
    if override:
        return Path(override)
    return find_project_root() / "config" / "settings"


def _load_client_settings() -> dict[str, Any]:
    """Load client.yaml and cache it."""
    global _client_settings

    config_path = get_settings_dir() / "client.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Client configuration not found: {config_path} (expected client.yaml)")

    with open(config_path) as f:
        _client_settings = yaml.safe_load(f) or {}
    return _client_settings


def get_client_settings() -> dict[str, Any]:
    """Return the cached client settings, loading them on first use."""
    if _client_settings is None:
        return _load_client_settings()
    return _client_settings


def load_client_config(
    url: str | None = None,
    settings: dict[str, Any] | None = None,
) -> ClientConfig:
    """
    Build a ClientConfig from client.yaml.

    Args:
        url: Overrides the api.url setting
        settings: Use these settings instead of reading client.yaml

    Raises:
        ValueError: If no API URL is configured
    """
    settings = settings if settings is not None else get_client_settings()
    api = settings.get("api", {})
    proxy = settings.get("proxy") or {}

    base_url = url or api.get("url")
    if not base_url:
        raise ValueError("No API URL configured (set api.url in client.yaml or pass --url)")

    config = ClientConfig({URL: base_url.rstrip("/")})
    if "connect_timeout" in api:
        config.put(CONNECT_TIMEOUT, float(api["connect_timeout"]))
    if "socket_timeout" in api:
        config.put(SOCKET_TIMEOUT, float(api["socket_timeout"]))
    if "verify_tls" in api:
        config.put(VERIFY_TLS, bool(api["verify_tls"]))

    if proxy.get("hostname"):
        config.put(PROXY_HOSTNAME, proxy["hostname"])
        config.put(PROXY_PORT, int(proxy.get("port", PROXY_PORT.default)))
        if proxy.get("username"):
            config.put(PROXY_USERNAME, proxy["username"])
            if proxy.get("password"):
                config.put(PROXY_PASSWORD, proxy["password"])
    return config
