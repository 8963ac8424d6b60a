from __future__ import annotations

import logging

import pytest

from chesstwist.cli.main import parse_config
from chesstwist.config import ServerConfig


def test_defaults_without_environment() -> None:
    cfg = ServerConfig.from_env({})
    assert cfg == ServerConfig(host="127.0.0.1", port=8000, log_level="info")
    assert cfg.logging_level == logging.INFO


def test_environment_overrides_defaults() -> None:
    cfg = ServerConfig.from_env(
        {"CHESSTWIST_HOST": "0.0.0.0", "CHESSTWIST_PORT": "9001", "CHESSTWIST_LOG_LEVEL": "DEBUG"}
    )
    assert (cfg.host, cfg.port, cfg.log_level) == ("0.0.0.0", 9001, "debug")
    assert cfg.logging_level == logging.DEBUG


def test_invalid_values_are_rejected() -> None:
    with pytest.raises(ValueError):
        ServerConfig.from_env({"CHESSTWIST_PORT": "http"})
    with pytest.raises(ValueError):
        ServerConfig(port=70000)
    with pytest.raises(ValueError):
        ServerConfig(log_level="verbose")


def test_flags_override_environment() -> None:
    cfg = parse_config(
        ["--port", "9100", "--log-level", "WARNING"],
        environ={"CHESSTWIST_HOST": "0.0.0.0", "CHESSTWIST_PORT": "9001"},
    )
    assert cfg == ServerConfig(host="0.0.0.0", port=9100, log_level="warning")


def test_bad_flags_exit() -> None:
    with pytest.raises(SystemExit):
        parse_config(["--port", "0"], environ={})
    with pytest.raises(SystemExit):
        parse_config(["--log-level", "loud"], environ={})
    with pytest.raises(SystemExit):
        parse_config([], environ={"CHESSTWIST_PORT": "nope"})
