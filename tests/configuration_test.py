"""Tests for client settings handling."""

from __future__ import annotations

import pytest

from acp_lsp.configuration import DEFAULT_SETTINGS, ConfigurationStore, merge_settings
from acp_lsp.exceptions import AcpLspError, ConfigurationError


class TestMergeSettings:
    def test_defaults(self) -> None:
        assert DEFAULT_SETTINGS.validation.debounce_ms == 300
        assert DEFAULT_SETTINGS.debounce_seconds == pytest.approx(0.3)
        assert DEFAULT_SETTINGS.validate_on_open
        assert DEFAULT_SETTINGS.validate_on_save
        assert DEFAULT_SETTINGS.diagnostics.enabled
        assert DEFAULT_SETTINGS.trace == "off"

    def test_none_keeps_base(self) -> None:
        assert merge_settings(None) is DEFAULT_SETTINGS

    def test_partial_payload(self) -> None:
        settings = merge_settings({"validation": {"debounceMs": 500}})
        assert settings.validation.debounce_ms == 500
        assert settings.validation.on_open
        assert settings.diagnostics.enabled

    def test_full_payload(self) -> None:
        settings = merge_settings({
            "validation": {"enabled": True, "onOpen": False, "onSave": False, "debounceMs": 0},
            "diagnostics": {"enabled": False},
            "trace": "verbose",
        })
        assert not settings.validate_on_open
        assert not settings.validate_on_save
        assert settings.debounce_seconds == 0
        assert not settings.diagnostics.enabled
        assert settings.trace == "verbose"

    def test_disabled_validation_overrides_toggles(self) -> None:
        settings = merge_settings({"validation": {"enabled": False}})
        assert not settings.validate_on_open
        assert not settings.validate_on_save

    def test_unknown_keys_are_ignored(self) -> None:
        assert merge_settings({"completion": {"enabled": False}}) == DEFAULT_SETTINGS

    @pytest.mark.parametrize(
        "payload",
        [
            "yes",
            {"validation": []},
            {"validation": {"onOpen": "true"}},
            {"validation": {"debounceMs": -1}},
            {"validation": {"debounceMs": True}},
            {"diagnostics": {"enabled": 1}},
            {"trace": "loud"},
        ],
    )
    def test_malformed_payload_raises(self, payload: object) -> None:
        with pytest.raises(ConfigurationError):
            merge_settings(payload)  # type: ignore[arg-type]


class TestConfigurationStore:
    def test_update_merges_into_current(self) -> None:
        store = ConfigurationStore()
        store.update({"validation": {"debounceMs": 50}})
        store.update({"trace": "messages"})
        assert store.settings.validation.debounce_ms == 50
        assert store.settings.trace == "messages"

    def test_bad_update_keeps_previous_settings(self) -> None:
        store = ConfigurationStore()
        store.update({"validation": {"debounceMs": 50}})
        before = store.settings
        store.update({"validation": {"debounceMs": "fast"}})
        assert store.settings is before

    def test_errors_share_base_class(self) -> None:
        assert issubclass(ConfigurationError, AcpLspError)
