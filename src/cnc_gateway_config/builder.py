"""
Config generators for CNC Gateway Config.

ConfigBuilder writes two files derived from the gateway id:

- hostapd_conf: access point config; SSID is the gateway id and the
  passphrase is the gateway id in lower case.
- gateway_agent_conf: connector config for the gateway agent; connector
  types come from the baseline config, plus one cloud connector pointing at
  the local network gateway and one device connector.

Each generator runs its stages in order (identity, [baseline], write) and
stops at the first failure, which is logged and re-raised to the caller.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Union

from cnc_gateway_config.config import GeneratorConfig
from cnc_gateway_config.config_io import ConfigWriter, read_existing
from cnc_gateway_config.errors import ConfigParseError, InvalidConstructorInput
from cnc_gateway_config.identity import IdentityResolver
from cnc_gateway_config.paths import ConfigPaths, ConfigTarget

CLOUD_CONNECTOR_TYPE = "CncCloud"
DEVICE_CONNECTOR_TYPE = "CncGateway"
CLOUD_CONNECTOR_PORT = 1883
CLOUD_CONNECTOR_PROTOCOL = "mqtt"

DEFAULT_HOSTAPD_INTERFACE = "wlan0"

Log = Union[logging.Logger, logging.LoggerAdapter]


def build_hostap_lines(gateway_id: str, interface: str = DEFAULT_HOSTAPD_INTERFACE) -> list[str]:
    """Return the hostapd config lines, in file order, for a gateway id."""
    return [
        f"interface={interface}",
        "",
        f"ssid={gateway_id}",
        f"wpa_passphrase={gateway_id.lower()}",
        "channel=6",
        "",
        "wmm_enabled=1",
        "wpa=1",
        "wpa_key_mgmt=WPA-PSK",
        "wpa_pairwise=TKIP",
        "rsn_pairwise=CCMP",
        "macaddr_acl=0",
        "auth_algs=1",
    ]


def cloud_connector_name(gateway_id: str) -> str:
    return f"{gateway_id}-cnc-cloud"


def device_connector_name(gateway_id: str) -> str:
    return f"{gateway_id}-cnc-gateway"


def build_gateway_agent_config(
    gateway_id: str,
    baseline: dict[str, Any],
    *,
    host: str,
    network_interface: str,
) -> dict[str, Any]:
    """
    Build the gateway agent config document.

    Args:
        gateway_id: Gateway id; account, gateway name and connector name prefix.
        baseline: Baseline config; only connectorTypes is copied.
        host: Local network gateway address for the cloud connector.
        network_interface: Local network interface for the cloud connector.
    """
    return {
        "connectorTypes": baseline["connectorTypes"],
        "deviceConnectors": {
            device_connector_name(gateway_id): {
                "type": DEVICE_CONNECTOR_TYPE,
                "config": {},
            },
        },
        "cloudConnectors": {
            cloud_connector_name(gateway_id): {
                "type": CLOUD_CONNECTOR_TYPE,
                "config": {
                    "host": host,
                    "port": CLOUD_CONNECTOR_PORT,
                    "protocol": CLOUD_CONNECTOR_PROTOCOL,
                    "account": gateway_id,
                    "networkInterface": network_interface,
                    "gatewayname": gateway_id,
                    "topics": "",
                },
            },
        },
    }


class ConfigBuilder:
    """
    Generates and writes the hostapd and gateway agent config files.

    The gateway id is resolved once per builder and shared by both generators.
    Generators may be called concurrently from different threads.
    """

    def __init__(
        self,
        logger: Log,
        config: GeneratorConfig,
        *,
        identity: Optional[IdentityResolver] = None,
        paths: Optional[ConfigPaths] = None,
        platform: Optional[str] = None,
    ) -> None:
        """
        Args:
            logger: Logger used on behalf of the calling module.
            config: Runtime configuration.
            identity: Gateway id resolver; defaults to one for the outbound interface.
            paths: Target path table; defaults to the one built from config.
            platform: Platform to resolve paths for; defaults to this process's platform.

        Raises:
            InvalidConstructorInput: If logger is missing or the local network gateway is empty.
        """
        if not isinstance(logger, (logging.Logger, logging.LoggerAdapter)):
            raise InvalidConstructorInput("Invalid logger specified (arg #1)")
        self._logger = logger

        gateway = config.local_network_gateway
        if not isinstance(gateway, str) or len(gateway) <= 0:
            message = f"Invalid local network gateway address specified: [{gateway}]"
            self._logger.error(message)
            raise InvalidConstructorInput(message)

        self._config = config
        self._local_network_gateway = gateway
        self._identity = identity or IdentityResolver(config.outbound_network_interface, log=logger)
        self._writer = ConfigWriter(
            paths if paths is not None else config.to_config_paths(),
            platform,
            log=logger,
        )

    @property
    def identity(self) -> IdentityResolver:
        return self._identity

    @property
    def writer(self) -> ConfigWriter:
        return self._writer

    def get_gateway_id(self) -> str:
        return self._identity.get_gateway_id()

    def generate_hostap_config(self, request_id: Optional[str] = None) -> None:
        """
        Generate and write the configuration for the local host AP daemon.

        Args:
            request_id: Optional request id, used in log messages.

        Raises:
            ConfigGeneratorError: If the gateway id cannot be resolved or the write fails.
        """
        self._logger.debug("Generating host ap configuration. RequestId: [%s]", request_id)
        try:
            gateway_id = self._identity.get_gateway_id()
            lines = build_hostap_lines(gateway_id, self._config.hostapd_interface)
            self._writer.write_config(ConfigTarget.HOSTAPD_CONF, "\n".join(lines))
        except Exception as exc:
            self._logger.error(
                "Error updating host ap configuration. RequestId: [%s]: %s", request_id, exc
            )
            raise
        self._logger.info("Host AP configuration updated successfully. RequestId: [%s]", request_id)

    def generate_gateway_agent_config(self, request_id: Optional[str] = None) -> None:
        """
        Generate and write the configuration for the gateway agent.

        Args:
            request_id: Optional request id, used in log messages.

        Raises:
            ConfigGeneratorError: If the gateway id cannot be resolved, the
                baseline config cannot be read or parsed, or the write fails.
        """
        self._logger.debug("Generating gateway agent configuration. RequestId: [%s]", request_id)
        try:
            gateway_id = self._identity.get_gateway_id()
            baseline = self._read_baseline()
            config = build_gateway_agent_config(
                gateway_id,
                baseline,
                host=self._local_network_gateway,
                network_interface=self._config.local_network_interface,
            )
            self._writer.write_config(ConfigTarget.GATEWAY_AGENT_CONF, json.dumps(config, indent=4))
        except Exception as exc:
            self._logger.error(
                "Error updating gateway agent configuration. RequestId: [%s]: %s", request_id, exc
            )
            raise
        self._logger.info(
            "Gateway agent configuration updated successfully. RequestId: [%s]", request_id
        )

    def generate_all(self, request_id: Optional[str] = None) -> None:
        """Generate the host AP config, then the gateway agent config."""
        self.generate_hostap_config(request_id)
        self.generate_gateway_agent_config(request_id)

    def _read_baseline(self) -> dict[str, Any]:
        path = self._config.baseline_config_file
        baseline = read_existing(path, parse=True, log=self._logger)
        if not isinstance(baseline, dict):
            self._logger.error("Baseline configuration is not a JSON object: [%s]", path)
            raise ConfigParseError(f"Baseline configuration is not a JSON object: {path}")
        if "connectorTypes" not in baseline:
            self._logger.error("Baseline configuration has no connectorTypes: [%s]", path)
            raise ConfigParseError(f"Baseline configuration has no connectorTypes: {path}")
        return baseline
