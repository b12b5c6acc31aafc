"""
Pytest configuration and shared fixtures
"""
import logging
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from cnc_gateway_config.config import GeneratorConfig  # noqa: E402
from cnc_gateway_config.identity import IdentityResolver  # noqa: E402
from cnc_gateway_config.paths import build_config_paths  # noqa: E402


@pytest.fixture
def mock_env(monkeypatch, tmp_path):
    """Set up mock environment variables"""
    env_vars = {
        'CNC_LOCAL_NETWORK_GATEWAY': '192.168.4.1',
        'CNC_LOCAL_NETWORK_INTERFACE': 'wlan0',
        'CNC_OUTBOUND_NETWORK_INTERFACE': 'eth0',
        'CNC_BASELINE_CONFIG_FILE': str(tmp_path / 'baseline.json'),
        'CNC_GATEWAY_AGENT_CONFIG_FILE': str(tmp_path / 'agent' / 'config.json'),
        'CNC_HOSTAPD_CONFIG_FILE': str(tmp_path / 'hostapd' / 'hostapd.conf'),
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    return env_vars


@pytest.fixture
def gateway_dirs(tmp_path):
    """Create the directories that hold the generated files."""
    (tmp_path / 'agent').mkdir()
    (tmp_path / 'hostapd').mkdir()
    return tmp_path


@pytest.fixture
def make_config(tmp_path):
    """Factory for GeneratorConfig rooted at tmp_path."""
    def _make(**overrides) -> GeneratorConfig:
        values = dict(
            local_network_gateway='192.168.4.1',
            local_network_interface='wlan0',
            outbound_network_interface='eth0',
            baseline_config_file=tmp_path / 'baseline.json',
            gateway_agent_config_file=tmp_path / 'agent' / 'config.json',
            hostapd_config_file=tmp_path / 'hostapd' / 'hostapd.conf',
            hostapd_interface='wlan0',
            version='1.0.0-test',
        )
        values.update(overrides)
        return GeneratorConfig(**values)

    return _make


@pytest.fixture
def config_paths(tmp_path):
    return build_config_paths(
        gateway_agent_conf_file=tmp_path / 'agent' / 'config.json',
        hostapd_conf_file=tmp_path / 'hostapd' / 'hostapd.conf',
        darwin_hostapd_conf_file=tmp_path / 'hostapd' / 'hostapd.conf',
    )


@pytest.fixture
def fake_lookup():
    """MAC lookup returning a fixed address"""
    return MagicMock(return_value='aa:bb:cc:dd:ee:ff')


@pytest.fixture
def identity(fake_lookup):
    return IdentityResolver('eth0', lookup=fake_lookup)


@pytest.fixture
def test_logger():
    return logging.getLogger('cnc_gateway_config.tests')

