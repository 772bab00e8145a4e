from unittest.mock import patch

import pytest

from relaybot.config.loader import ConfigError, configure_logging, load_config
from relaybot.config.schema import Config


@pytest.fixture(autouse=True)
def _no_sink_changes():
    with patch("relaybot.config.loader.configure_logging") as mock_configure:
        yield mock_configure


def test_defaults():
    cfg = Config()
    assert cfg.telegram.max_message_size == 3500
    assert cfg.telegram.max_retries == 3
    assert cfg.debug is False


def test_load_minimal_environment():
    cfg = load_config({"BOT_API_TOKEN": "tok"})
    assert cfg.telegram.token == "tok"
    assert cfg.telegram.proxy is None
    assert cfg.debug is False


def test_missing_token():
    with pytest.raises(ConfigError, match="BOT_API_TOKEN environment variable not set"):
        load_config({})


def test_overrides():
    cfg = load_config({
        "BOT_API_TOKEN": "tok",
        "TG_BOT_DEBUG": "true",
        "TG_MAX_MESSAGE_SIZE": "1000",
        "TG_PROXY": "socks5://localhost:1080",
    })
    assert cfg.debug is True
    assert cfg.telegram.max_message_size == 1000
    assert cfg.telegram.proxy == "socks5://localhost:1080"


def test_non_positive_message_size_rejected():
    with pytest.raises(ConfigError, match="invalid configuration"):
        load_config({"BOT_API_TOKEN": "tok", "TG_MAX_MESSAGE_SIZE": "0"})


@pytest.mark.parametrize("flag,debug", [("true", True), ("TRUE", True), ("", False), ("1", False)])
def test_debug_flag_applied_to_logging(_no_sink_changes, flag, debug):
    load_config({"BOT_API_TOKEN": "tok", "TG_BOT_DEBUG": flag})
    _no_sink_changes.assert_called_once_with(debug)


@pytest.mark.parametrize("debug,level", [(True, "DEBUG"), (False, "INFO")])
def test_configure_logging_level(debug, level):
    with patch("relaybot.config.loader.logger") as mock_logger:
        configure_logging(debug)
    mock_logger.remove.assert_called_once_with()
    assert mock_logger.add.call_args.kwargs["level"] == level
