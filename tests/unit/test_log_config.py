from __future__ import annotations

import logging

import pytest

from cnc_gateway_config.log_config import apply_log_level, level_from_env


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("DEBUG", logging.DEBUG),
        ("warning", logging.WARNING),
        (" error ", logging.ERROR),
        ("10", 10),
        ("nonsense", logging.INFO),
        ("", logging.INFO),
    ],
)
def test_level_from_env(monkeypatch, raw, expected):
    monkeypatch.setenv("CNC_LOG_LEVEL", raw)
    assert level_from_env() == expected


def test_level_from_env_unset_is_info(monkeypatch):
    monkeypatch.delenv("CNC_LOG_LEVEL", raising=False)
    assert level_from_env() == logging.INFO


def test_apply_log_level_sets_root():
    root = logging.getLogger()
    previous = root.level
    try:
        apply_log_level(logging.DEBUG)
        assert root.level == logging.DEBUG
    finally:
        root.setLevel(previous)
