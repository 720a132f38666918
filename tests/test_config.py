"""Unit tests for the config module."""
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from codexweb.config import (
    ApprovalMode,
    ConfigRecord,
    ConfigStore,
    JsonFileConfigStore,
    create_config_store,
    load_settings,
)


class TestConfigRecord:
    """Tests for ConfigRecord model."""

    def test_defaults(self):
        """Test the out-of-the-box configuration."""
        record = ConfigRecord()

        assert record.default_provider == "openai"
        assert record.default_model == "o4-mini"
        assert record.approval_mode == ApprovalMode.SUGGEST
        assert record.to_wire() == {
            "defaultProvider": "openai",
            "defaultModel": "o4-mini",
            "approvalMode": "suggest",
        }

    def test_merged_accepts_aliases_and_names(self):
        """Test that partial updates may use camelCase or field names."""
        record = ConfigRecord().merged({"apiKeyOpenAI": "sk-1", "default_model": "gpt-4.1"})

        assert record.api_key_openai == "sk-1"
        assert record.default_model == "gpt-4.1"

    def test_merged_keeps_unmentioned_fields(self):
        """Test that merging only touches the given keys."""
        record = ConfigRecord(instructions="be brief").merged({"approvalMode": "full-auto"})

        assert record.instructions == "be brief"
        assert record.approval_mode == ApprovalMode.FULL_AUTO

    def test_invalid_approval_mode_fails(self):
        """Test that an unknown approval mode fails validation."""
        with pytest.raises(ValidationError):
            ConfigRecord().merged({"approvalMode": "yolo"})

    @given(st.sampled_from(list(ApprovalMode)))
    def test_approval_mode_round_trips_through_wire(self, mode: ApprovalMode):
        """Property test: every approval mode survives serialization."""
        record = ConfigRecord(approval_mode=mode)

        assert ConfigRecord.model_validate(record.to_wire()).approval_mode == mode


class TestConfigStores:
    """Tests for ConfigStore implementations."""

    def test_config_store_is_abstract(self):
        """Test that ConfigStore cannot be instantiated directly."""
        with pytest.raises(TypeError):
            ConfigStore()  # type: ignore

    def test_memory_store_set_and_get(self, config_store):
        """Test partial updates on the in-memory store."""
        updated = config_store.set({"defaultProvider": "gemini"})

        assert updated.default_provider == "gemini"
        assert config_store.get().default_provider == "gemini"
        assert config_store.backend_type == "memory"

    def test_get_returns_a_copy(self, config_store):
        """Test that mutating a returned record does not change the store."""
        record = config_store.get()
        record.default_model = "changed"

        assert config_store.get().default_model == "o4-mini"

    def test_invalid_update_leaves_store_unchanged(self, config_store):
        """Test that a rejected update is not applied."""
        with pytest.raises(ValidationError):
            config_store.set({"approvalMode": "yolo"})

        assert config_store.get().approval_mode == ApprovalMode.SUGGEST

    def test_json_store_creates_missing_file(self, config_path):
        """Test that a missing file is written with defaults."""
        store = create_config_store("json", path=config_path)

        assert store.backend_type == "json"
        assert json.loads(config_path.read_text()) == ConfigRecord().to_wire()

    def test_json_store_persists_updates(self, config_path):
        """Test that updates survive reopening the file."""
        create_config_store("json", path=config_path).set({"apiKeyGemini": "g-key", "approvalMode": "auto-edit"})

        reopened = JsonFileConfigStore(config_path).get()

        assert reopened.api_key_gemini == "g-key"
        assert reopened.approval_mode == ApprovalMode.AUTO_EDIT

    def test_json_store_recovers_from_corrupt_file(self, config_path):
        """Test that an unreadable file is replaced by defaults."""
        config_path.write_text("{not json")

        store = JsonFileConfigStore(config_path)

        assert store.get() == ConfigRecord()
        assert json.loads(config_path.read_text()) == ConfigRecord().to_wire()

    def test_factory_requires_path(self):
        """Test that the JSON store needs a path."""
        with pytest.raises(TypeError):
            create_config_store("json")

    def test_factory_unsupported_backend(self):
        """Test that unknown backends are rejected."""
        with pytest.raises(ValueError, match="Unsupported config store"):
            create_config_store("redis")


class TestSettings:
    """Tests for process settings."""

    def test_defaults(self, monkeypatch):
        """Test settings with no environment overrides."""
        for name in ("CODEXWEB_HOST", "CODEXWEB_PORT", "PORT", "CODEXWEB_BACKEND", "CODEXWEB_CONFIG_PATH"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setattr("codexweb.config.settings.load_dotenv", lambda: False)

        settings = load_settings()

        assert settings.port == 3001
        assert settings.backend == "simulated"
        assert settings.config_path == "temp.config.json"

    def test_environment_overrides(self, monkeypatch):
        """Test that CODEXWEB_* variables are read."""
        monkeypatch.setattr("codexweb.config.settings.load_dotenv", lambda: False)
        monkeypatch.setenv("CODEXWEB_PORT", "8080")
        monkeypatch.setenv("CODEXWEB_BACKEND", "LLM")
        monkeypatch.setenv("CODEXWEB_SIMULATED_DELAY", "0")

        settings = load_settings()

        assert settings.port == 8080
        assert settings.backend == "llm"
        assert settings.simulated_delay == 0.0
