# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Client settings for the ACP language server."""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


SETTINGS_SECTION = 'acp'
TRACE_VALUES = ('off', 'messages', 'verbose')


@dataclass(frozen=True)
class ValidationSettings:
    enabled: bool = True
    on_open: bool = True
    on_save: bool = True
    debounce_ms: int = 300


@dataclass(frozen=True)
class DiagnosticsSettings:
    enabled: bool = True


@dataclass(frozen=True)
class AcpSettings:
    validation: ValidationSettings = field(default_factory=ValidationSettings)
    diagnostics: DiagnosticsSettings = field(default_factory=DiagnosticsSettings)
    trace: str = 'off'

    @property
    def debounce_seconds(self) -> float:
        return self.validation.debounce_ms / 1000.0

    @property
    def validate_on_open(self) -> bool:
        return self.validation.enabled and self.validation.on_open

    @property
    def validate_on_save(self) -> bool:
        return self.validation.enabled and self.validation.on_save


DEFAULT_SETTINGS = AcpSettings()


def merge_settings(payload: Optional[Mapping[str, Any]], base: AcpSettings = DEFAULT_SETTINGS) -> AcpSettings:
    """Merge a client settings payload (the ``acp`` section) into base settings.

    Missing keys keep the base value.

    Raises:
        ConfigurationError: If a present key has the wrong type
    """
    if payload is None:
        return base
    if not isinstance(payload, Mapping):
        raise ConfigurationError(f"Settings must be an object, got {type(payload).__name__}")

    validation = base.validation
    raw_validation = payload.get('validation')
    if raw_validation is not None:
        _expect_mapping('validation', raw_validation)
        validation = replace(
            validation,
            enabled=_get_bool(raw_validation, 'enabled', validation.enabled),
            on_open=_get_bool(raw_validation, 'onOpen', validation.on_open),
            on_save=_get_bool(raw_validation, 'onSave', validation.on_save),
            debounce_ms=_get_debounce(raw_validation, validation.debounce_ms),
        )

    diagnostics = base.diagnostics
    raw_diagnostics = payload.get('diagnostics')
    if raw_diagnostics is not None:
        _expect_mapping('diagnostics', raw_diagnostics)
        diagnostics = replace(diagnostics, enabled=_get_bool(raw_diagnostics, 'enabled', diagnostics.enabled))

    trace = payload.get('trace', base.trace)
    if trace not in TRACE_VALUES:
        raise ConfigurationError(f"trace must be one of {', '.join(TRACE_VALUES)}, got {trace!r}")

    return AcpSettings(validation=validation, diagnostics=diagnostics, trace=trace)


class ConfigurationStore:
    """Holds the current settings; a bad update keeps the previous settings."""

    def __init__(self, settings: AcpSettings = DEFAULT_SETTINGS):
        self._settings = settings

    @property
    def settings(self) -> AcpSettings:
        return self._settings

    def update(self, payload: Optional[Mapping[str, Any]]) -> AcpSettings:
        """Apply a settings payload from the client."""
        try:
            self._settings = merge_settings(payload, self._settings)
            logger.info(f"Settings updated: {self._settings}")
        except ConfigurationError as e:
            logger.warning(f"Ignoring invalid settings: {e}")
        return self._settings


def _expect_mapping(name: str, value: Any):
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"{name} must be an object, got {type(value).__name__}")


def _get_bool(section: Mapping[str, Any], key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(f"{key} must be a boolean, got {value!r}")
    return value


def _get_debounce(section: Mapping[str, Any], default: int) -> int:
    value = section.get('debounceMs', default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigurationError(f"debounceMs must be a non-negative number, got {value!r}")
    return int(value)
