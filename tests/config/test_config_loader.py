"""Tests for configuration loading."""

from pathlib import Path

import pytest

from mecenas.config.loader import ConfigError, apply_env_overrides, get_anthropic_key, load_config, save_config
from mecenas.config.schema import MecenasConfig


class TestLoadConfig:
    def test_missing_file_returns_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml", env={})
        assert config.privacy.mode == "auto"
        assert config.privacy.block_cloud_on_pii is True
        assert config.agent.model == "SpeakLeash/bielik-11b-v2.2-instruct:Q4_K_M"
        assert config.agent.speed_model == "gemma3:4b"
        assert config.cloud.model == "claude-sonnet-4-5-20250929"

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "mecenas.yaml"
        path.write_text("privacy:\n  mode: strict\nagent:\n  temperature: 0.1\n", encoding="utf-8")
        config = load_config(path, env={})
        assert config.privacy.mode == "strict"
        assert config.agent.temperature == 0.1

    def test_empty_file_returns_defaults(self, tmp_path):
        path = tmp_path / "mecenas.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path, env={}) == MecenasConfig()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "mecenas.yaml"
        path.write_text("privacy: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path, env={})

    def test_validation_error(self, tmp_path):
        path = tmp_path / "mecenas.yaml"
        path.write_text("agent:\n  max_tokens: 10\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="validation failed"):
            load_config(path, env={})

    def test_invalid_privacy_mode_rejected(self, tmp_path):
        path = tmp_path / "mecenas.yaml"
        path.write_text("privacy:\n  mode: paranoid\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path, env={})


class TestEnvOverrides:
    def test_overrides(self):
        config = apply_env_overrides(
            MecenasConfig(),
            {
                "MECENAS_MODEL": "bielik:latest",
                "MECENAS_SPEED_MODEL": "qwen2.5:3b",
                "MECENAS_PRIVACY_MODE": "strict",
                "OLLAMA_URL": "http://gpu-box:11434/",
            },
        )
        assert config.agent.model == "bielik:latest"
        assert config.agent.speed_model == "qwen2.5:3b"
        assert config.privacy.mode == "strict"
        assert config.ollama.host == "http://gpu-box:11434"

    def test_invalid_privacy_mode_ignored(self):
        config = apply_env_overrides(MecenasConfig(), {"MECENAS_PRIVACY_MODE": "yolo"})
        assert config.privacy.mode == "auto"

    def test_anthropic_key(self):
        config = MecenasConfig()
        assert get_anthropic_key(config, {"ANTHROPIC_API_KEY": "sk-test"}) == "sk-test"
        assert get_anthropic_key(config, {"ANTHROPIC_API_KEY": ""}) is None
        config.cloud.api_key_env = "MY_KEY"
        assert get_anthropic_key(config, {"MY_KEY": "k"}) == "k"


def test_save_and_reload(tmp_path):
    path = tmp_path / "sub" / "mecenas.yaml"
    config = MecenasConfig()
    config.privacy.mode = "off"
    save_config(config, str(path))
    assert Path(path).exists()
    assert load_config(path, env={}).privacy.mode == "off"
