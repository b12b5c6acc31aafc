"""
CNC Gateway Config runtime configuration.

Single source for runtime configuration. Values come from environment variables,
optionally loaded from standard env files.

Priority (lowest -> highest):
1) /etc/cnc-gateway/config.env (system install)
2) ~/.config/cnc-gateway/.env (user install)
3) ./.env (project override)
4) process environment variables (always win)
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version as _pkg_version
from pathlib import Path
from typing import Iterable

from dotenv import load_dotenv

from cnc_gateway_config.paths import ConfigPaths, DEFAULT_HOSTAPD_CONF, build_config_paths


class ConfigError(ValueError):
    """Raised when configuration is missing or invalid."""


def package_version() -> str:
    try:
        return _pkg_version("cnc-gateway-config")
    except PackageNotFoundError:
        return "0.0.0+dev"


def _env_paths() -> Iterable[Path]:
    # 1) system install
    yield Path("/etc/cnc-gateway/config.env")

    # 2) user config dir
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", str(Path.home())))
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
    yield base / "cnc-gateway" / ".env"

    # 3) project override
    yield Path(".env")


def _require_env(key: str) -> str:
    v = os.getenv(key)
    if v is None or v == "":
        raise ConfigError(f"Missing required environment variable: {key}")
    return v


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    local_network_gateway: str  # validated by ConfigBuilder
    local_network_interface: str
    outbound_network_interface: str
    baseline_config_file: Path
    gateway_agent_config_file: Path
    hostapd_config_file: Path
    hostapd_interface: str
    version: str

    def to_config_paths(self) -> ConfigPaths:
        return build_config_paths(
            gateway_agent_conf_file=self.gateway_agent_config_file,
            hostapd_conf_file=self.hostapd_config_file,
        )


def load_config(*, dotenv_enabled: bool = True) -> GeneratorConfig:
    """
    Load config by reading env files and then validating environment variables.

    Returns an immutable GeneratorConfig. Raises ConfigError on failure.
    """
    if dotenv_enabled:
        for p in _env_paths():
            if p.is_file():
                # do not override existing env vars; later files can fill missing
                load_dotenv(p, override=False)

    local_network_gateway = os.getenv("CNC_LOCAL_NETWORK_GATEWAY", "").strip()

    baseline_config_file = Path(_require_env("CNC_BASELINE_CONFIG_FILE"))
    gateway_agent_config_file = Path(_require_env("CNC_GATEWAY_AGENT_CONFIG_FILE"))
    hostapd_config_file = Path(os.getenv("CNC_HOSTAPD_CONFIG_FILE") or DEFAULT_HOSTAPD_CONF)

    return GeneratorConfig(
        local_network_gateway=local_network_gateway,
        local_network_interface=os.getenv("CNC_LOCAL_NETWORK_INTERFACE") or "wlan0",
        outbound_network_interface=os.getenv("CNC_OUTBOUND_NETWORK_INTERFACE") or "eth0",
        baseline_config_file=baseline_config_file,
        gateway_agent_config_file=gateway_agent_config_file,
        hostapd_config_file=hostapd_config_file,
        hostapd_interface=os.getenv("CNC_HOSTAPD_INTERFACE") or "wlan0",
        version=package_version(),
    )
