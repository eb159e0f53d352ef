"""
Tests for configuration loading.
"""

import json
import logging

import pytest

from common.config import (
    ConfigError,
    DEFAULTS,
    block_params,
    configure_logger,
    get_config,
    load_config,
    parse_log_level,
)


class TestLoadConfig:
    """Test load_config."""

    def test_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("version: '1.0'\nnats_url: nats://example:4222\n")

        assert load_config(path)["nats_url"] == "nats://example:4222"

    def test_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"version": "1.2", "block": {"emit_events": False}}))

        assert load_config(str(path))["block"] == {"emit_events": False}

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("")

        assert load_config(path) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- one\n- two\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_unsupported_version(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"version": "2.0"}))

        with pytest.raises(ConfigError, match="Unsupported"):
            load_config(path)

    def test_invalid_version(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"version": "latest"}))

        with pytest.raises(ConfigError, match="Invalid config version"):
            load_config(path)


class TestBlockParams:
    """Test block_params."""

    def test_defaults(self):
        params = block_params({})

        assert params["nats_url"] == DEFAULTS["nats_url"]
        assert params["emit_events"] is True
        assert params["clear_on_empty_library"] is True
        assert params["render_timeout"] == 10.0
        assert params["player_subject_prefix"] == "amp.player"
        assert params["skins"] == {
            "default_url": None,
            "cdn_hosts": None,
            "host": None,
        }

    def test_block_section_wins(self):
        params = block_params({
            "clear_on_empty_library": True,
            "block": {
                "clear_on_empty_library": False,
                "render_timeout": 3,
                "skins": {"host": "example.org", "cdn_hosts": {}},
            },
        })

        assert params["clear_on_empty_library"] is False
        assert params["render_timeout"] == 3.0
        assert params["skins"]["host"] == "example.org"
        assert params["skins"]["cdn_hosts"] == {}

    def test_top_level_fallback(self):
        params = block_params({"emit_events": False, "block": None})
        assert params["emit_events"] is False


class TestLogging:
    """Test logging helpers."""

    @pytest.mark.parametrize("name,level", [
        ("info", logging.INFO),
        ("DEBUG", logging.DEBUG),
        ("warning", logging.WARNING),
    ])
    def test_parse_log_level(self, name, level):
        assert parse_log_level(name) == level

    def test_unknown_log_level(self):
        with pytest.raises(ConfigError):
            parse_log_level("chatty")

    def test_configure_logger_by_name(self, tmp_path):
        log_file = tmp_path / "block.log"
        logger = configure_logger("test.amp.block", log_file=str(log_file), log_level=logging.DEBUG)
        try:
            logger.debug("hello")
            for handler in logger.handlers:
                handler.flush()

            assert logger.level == logging.DEBUG
            assert "[test.amp.block] [DEBUG] hello" in log_file.read_text()
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()

    def test_get_config(self, tmp_path):
        log_file = tmp_path / "service.log"
        path = tmp_path / "config.yaml"
        path.write_text(
            "version: '1.0'\n"
            "logging:\n"
            "  level: debug\n"
            f"  file: {log_file}\n"
            "block:\n"
            "  player_subject_prefix: test.player\n"
        )

        root = logging.getLogger()
        handlers = list(root.handlers)
        level = root.level
        try:
            conf, params = get_config(path)

            assert conf["logging"]["level"] == "debug"
            assert params["player_subject_prefix"] == "test.player"
            assert any(
                getattr(handler, "baseFilename", None) == str(log_file)
                for handler in root.handlers
            )
        finally:
            for handler in list(root.handlers):
                if handler not in handlers:
                    root.removeHandler(handler)
                    handler.close()
            root.setLevel(level)
