"""
Config file locations for CNC Gateway Config.

Each generated artifact is a logical target. A target maps, per operating
system, to exactly one absolute path; platforms without a mapping cannot
generate that target.

Path table:
    hostapd_conf
        linux   -> /etc/hostapd/hostapd.conf
        darwin  -> ./.tmp/hostapd.conf (absolute, resolved at build time)
    gateway_agent_conf
        linux   -> CNC_GATEWAY_AGENT_CONFIG_FILE
        darwin  -> CNC_GATEWAY_AGENT_CONFIG_FILE
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

logger = logging.getLogger(__name__)

SUPPORTED_PLATFORMS = ("linux", "darwin")

DEFAULT_HOSTAPD_CONF = Path("/etc/hostapd/hostapd.conf")
DEFAULT_DARWIN_HOSTAPD_CONF = Path("./.tmp/hostapd.conf")


class ConfigTarget(str, Enum):
    """Logical name of a generated configuration artifact."""

    HOSTAPD_CONF = "hostapd_conf"
    GATEWAY_AGENT_CONF = "gateway_agent_conf"


def current_platform() -> str:
    """Operating-system identifier of this process (linux, darwin, win32, ...)."""
    return sys.platform


@dataclass(frozen=True, slots=True)
class ConfigPaths:
    """
    Immutable target -> platform -> path table.

    All paths are absolute. Resolution never touches the filesystem.
    """

    table: Mapping[str, Mapping[str, Path]]

    def resolve(
        self,
        target: Union[ConfigTarget, str],
        platform: str,
        *,
        log: Optional[logging.Logger] = None,
    ) -> Optional[Path]:
        """
        Return the configured path for target on platform, or None if unsupported.

        Args:
            target: ConfigTarget or its string value.
            platform: Operating-system identifier, e.g. "linux".
            log: Logger to report failures on; defaults to the module logger.
        """
        log = log or logger
        name = target.value if isinstance(target, ConfigTarget) else str(target)

        by_platform = self.table.get(name)
        if by_platform is None:
            log.error("Unable to determine config file path for target: [%s]", name)
            return None

        path = by_platform.get(platform)
        if path is None:
            log.error("Config target [%s] not defined for current platform: [%s]", name, platform)
            return None

        return path


def _absolute(path: Union[str, Path]) -> Path:
    # abspath does not follow symlinks, unlike Path.resolve()
    return Path(os.path.abspath(path))


def build_config_paths(
    *,
    gateway_agent_conf_file: Union[str, Path],
    hostapd_conf_file: Optional[Union[str, Path]] = None,
    darwin_hostapd_conf_file: Optional[Union[str, Path]] = None,
) -> ConfigPaths:
    """
    Build the path table.

    Args:
        gateway_agent_conf_file: Gateway agent config file, used on every platform.
        hostapd_conf_file: hostapd config on Linux. Defaults to /etc/hostapd/hostapd.conf.
        darwin_hostapd_conf_file: hostapd config on macOS (development only).
                                  Defaults to ./.tmp/hostapd.conf under the working directory.

    Returns:
        Immutable ConfigPaths with absolute paths.
    """
    linux_hostapd = _absolute(hostapd_conf_file or DEFAULT_HOSTAPD_CONF)
    darwin_hostapd = _absolute(darwin_hostapd_conf_file or DEFAULT_DARWIN_HOSTAPD_CONF)
    agent_conf = _absolute(gateway_agent_conf_file)

    table = {
        ConfigTarget.HOSTAPD_CONF.value: MappingProxyType({
            "linux": linux_hostapd,
            "darwin": darwin_hostapd,
        }),
        ConfigTarget.GATEWAY_AGENT_CONF.value: MappingProxyType({
            "linux": agent_conf,
            "darwin": agent_conf,
        }),
    }
    return ConfigPaths(table=MappingProxyType(table))
