"""
Gateway identity for CNC Gateway Config.

The gateway id is the MAC address of the outbound network interface with the
colon separators removed, upper-cased (e.g. AABBCCDDEEFF). It is used as the
hostapd SSID, the cloud connector account and the connector name prefix.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Callable, Optional, Union

import psutil

from cnc_gateway_config.errors import IdentityResolutionError

logger = logging.getLogger(__name__)

_GATEWAY_ID_RE = re.compile(r"^[0-9A-F]{12}$")

MacLookup = Callable[[str], str]


def lookup_mac_address(interface: str) -> str:
    """
    Return the hardware address of a network interface.

    Raises:
        IdentityResolutionError: If the interface does not exist or has no link-layer address.
    """
    try:
        addrs = psutil.net_if_addrs()
    except OSError as exc:
        raise IdentityResolutionError(f"Unable to list network interfaces: {exc}") from exc

    if interface not in addrs:
        raise IdentityResolutionError(f"Network interface not found: [{interface}]")

    for addr in addrs[interface]:
        if addr.family == psutil.AF_LINK and addr.address:
            return addr.address

    raise IdentityResolutionError(f"No hardware address for network interface: [{interface}]")


def normalize_mac(mac: str) -> str:
    """Strip colon separators and upper-case. No format validation is done."""
    return mac.replace(":", "").upper()


class IdentityResolver:
    """
    Lazily resolves and caches the gateway id.

    The first successful lookup is cached for the lifetime of the resolver.
    Concurrent first callers are serialized so the hardware lookup runs once.
    Failures are not cached; the next call looks the address up again.
    """

    def __init__(
        self,
        interface: str,
        *,
        lookup: MacLookup = lookup_mac_address,
        log: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
    ) -> None:
        self.interface = interface
        self._lookup = lookup
        self._logger = log or logger
        self._gateway_id: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def cached_id(self) -> Optional[str]:
        return self._gateway_id

    def get_gateway_id(self) -> str:
        """
        Return the gateway id, resolving it on first use.

        Raises:
            IdentityResolutionError: If the MAC address lookup or normalization fails.
        """
        gateway_id = self._gateway_id
        if gateway_id is not None:
            return gateway_id

        with self._lock:
            # Another caller may have resolved it while we waited
            if self._gateway_id is not None:
                return self._gateway_id

            try:
                mac = self._lookup(self.interface)
            except Exception as exc:
                self._logger.error(
                    "Unable to get mac address of outbound network interface: [%s]: %s",
                    self.interface,
                    exc,
                )
                if isinstance(exc, IdentityResolutionError):
                    raise
                raise IdentityResolutionError(
                    f"Unable to get mac address of outbound network interface: [{self.interface}]"
                ) from exc

            try:
                gateway_id = normalize_mac(mac)
            except Exception as exc:
                self._logger.error("Unable to normalize mac address [%r]: %s", mac, exc)
                raise IdentityResolutionError(f"Invalid mac address: {mac!r}") from exc

            if not _GATEWAY_ID_RE.fullmatch(gateway_id):
                self._logger.warning(
                    "Unexpected mac address format on [%s]: [%s]; using [%s] as gateway id",
                    self.interface,
                    mac,
                    gateway_id,
                )

            self._gateway_id = gateway_id
            self._logger.debug("Gateway id resolved from [%s]: [%s]", self.interface, gateway_id)
            return gateway_id

    def reset(self) -> None:
        """Forget the cached gateway id."""
        with self._lock:
            self._gateway_id = None
