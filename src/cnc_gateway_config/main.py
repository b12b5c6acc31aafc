"""
CNC Gateway Config entrypoint.

CLI:
  cnc-gateway-config hostapd        -> write the hostapd config
  cnc-gateway-config gateway-agent  -> write the gateway agent config
  cnc-gateway-config all            -> write both
  cnc-gateway-config show-id        -> print the gateway id
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional

from cnc_gateway_config.builder import ConfigBuilder
from cnc_gateway_config.config import ConfigError, load_config, package_version
from cnc_gateway_config.errors import ConfigGeneratorError
from cnc_gateway_config.log_config import configure_logging

logger = logging.getLogger(__name__)


def get_version_string() -> str:
    return package_version()


def _build_builder() -> ConfigBuilder:
    cfg = load_config()
    return ConfigBuilder(logger, cfg)


def run_generate(target: str, request_id: Optional[str] = None) -> int:
    """
    Generate one target ("hostapd", "gateway-agent" or "all").
    Returns process exit code.
    """
    try:
        builder = _build_builder()
        if target == "hostapd":
            builder.generate_hostap_config(request_id)
        elif target == "gateway-agent":
            builder.generate_gateway_agent_config(request_id)
        else:
            builder.generate_all(request_id)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    except ConfigGeneratorError:
        # already logged by the builder
        return 1
    return 0


def show_id() -> int:
    try:
        gateway_id = _build_builder().get_gateway_id()
    except (ConfigError, ConfigGeneratorError) as exc:
        logger.error("Unable to resolve gateway id: %s", exc)
        return 1
    print(gateway_id)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="cnc-gateway-config")
    p.add_argument("--version", action="version", version=get_version_string())

    sub = p.add_subparsers(dest="cmd", required=True)

    for name, help_text in (
        ("hostapd", "Write the hostapd access point config"),
        ("gateway-agent", "Write the gateway agent connector config"),
        ("all", "Write the hostapd and gateway agent configs"),
    ):
        gen = sub.add_parser(name, help=help_text)
        gen.add_argument("--request-id", type=str, default=None, help="Request id for log messages")

    sub.add_parser("show-id", help="Print the gateway id")

    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.cmd in ("hostapd", "gateway-agent", "all"):
        raise SystemExit(run_generate(args.cmd, args.request_id))

    if args.cmd == "show-id":
        raise SystemExit(show_id())

    raise SystemExit(2)


if __name__ == "__main__":
    main()
