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

"""Validation of ACP JSON artifacts against their schemas."""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from jsonschema.exceptions import ValidationError
from lsprotocol import types as lsp

from ..documents.snapshot import DocumentSnapshot
from ..utils.text_utils import TextIndex
from ..utils.uri_utils import uri_filename
from .registry import SchemaRegistry, SchemaType

logger = logging.getLogger(__name__)


JSON_DIAGNOSTIC_SOURCE = 'acp-json'

# Checked in order; the suffixes are disjoint so at most one rule matches
SCHEMA_FILE_RULES: Tuple[Tuple[SchemaType, str, str], ...] = (
    (SchemaType.CONFIG, 'suffix', 'acp.config.json'),
    (SchemaType.CACHE, 'suffix', 'acp.cache.json'),
    (SchemaType.VARS, 'suffix', 'acp.vars.json'),
    (SchemaType.ATTEMPTS, 'exact', 'acp.attempts.json'),
    (SchemaType.SYNC, 'exact', 'acp.sync.json'),
    (SchemaType.PRIMER, 'suffix', 'primer.json'),
)

_REQUIRED_MESSAGE = re.compile(r'^([\'"])(.*)\1 is a required property')
_JSON_ERROR_OFFSET = re.compile(r'char (\d+)')

# Width of the fallback range on the first line
_DEFAULT_RANGE_WIDTH = 100
_JSON_ERROR_WIDTH = 10

_TOO_DEEP_MESSAGE = "document is nested too deeply"
_CONSTANT_TOKEN = re.compile(r'-?(?:NaN|Infinity)\b')


class NonStandardConstantError(ValueError):
    """Raised for NaN, Infinity and -Infinity, which Python accepts but JSON does not."""

    def __init__(self, constant: str):
        super().__init__(f"{constant} is not a valid JSON value")
        self.constant = constant


def _reject_constant(constant: str):
    raise NonStandardConstantError(constant)


def _constant_offset(text: str, constant: str) -> int:
    for match in _CONSTANT_TOKEN.finditer(text):
        if match.group(0) == constant:
            return match.start()
    return 0


@dataclass
class ValidationResult:
    valid: bool
    schema_type: Optional[SchemaType]
    diagnostics: List[lsp.Diagnostic] = field(default_factory=list)


def detect_schema_type(uri: str) -> Optional[SchemaType]:
    """Detect the schema type of a document from its filename.

    | Schema Type | File Patterns |
    |-------------|---------------|
    | config | `.acp.config.json`, `acp.config.json`, `*.acp.config.json` |
    | cache | `.acp.cache.json`, `acp.cache.json`, `*.acp.cache.json` |
    | vars | `.acp.vars.json`, `acp.vars.json`, `*.acp.vars.json` |
    | attempts | `acp.attempts.json` |
    | sync | `acp.sync.json` |
    | primer | `*.primer.json`, `.primer.json` |
    """
    filename = uri_filename(uri)
    for schema_type, kind, pattern in SCHEMA_FILE_RULES:
        if kind == 'exact' and filename == pattern:
            return schema_type
        if kind == 'suffix' and filename.endswith(pattern):
            return schema_type
    return None


class SchemaValidator:
    """Validates ACP JSON documents and converts the errors to diagnostics."""

    def __init__(self, registry: Optional[SchemaRegistry] = None):
        self.registry = registry or SchemaRegistry()

    def detect_schema_type(self, uri: str) -> Optional[SchemaType]:
        return detect_schema_type(uri)

    def is_acp_json_file(self, uri: str) -> bool:
        return detect_schema_type(uri) is not None

    def validate(self, document: DocumentSnapshot) -> ValidationResult:
        """Validate a document against its detected schema."""
        schema_type = detect_schema_type(document.uri)
        if schema_type is None:
            return ValidationResult(valid=True, schema_type=None)

        validator = self.registry.get_validator(schema_type)
        if validator is None:
            logger.warning(f"No validator available for schema type: {schema_type.value}")
            return ValidationResult(valid=True, schema_type=schema_type)

        index = TextIndex(document.text)
        try:
            data = json.loads(document.text, parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            return self._invalid_json(schema_type, index, str(e), e.pos)
        except NonStandardConstantError as e:
            return self._invalid_json(schema_type, index, str(e), _constant_offset(document.text, e.constant))
        except RecursionError:
            return self._invalid_json(schema_type, index, _TOO_DEEP_MESSAGE, 0)

        try:
            diagnostics = [
                self._to_diagnostic(index, error, schema_type)
                for error in validator.iter_errors(data)
            ]
        except RecursionError:
            return self._invalid_json(schema_type, index, _TOO_DEEP_MESSAGE, 0)
        logger.debug(
            f"Validated {schema_type.value} schema: "
            f"{'valid' if not diagnostics else str(len(diagnostics)) + ' errors'}"
        )
        return ValidationResult(valid=not diagnostics, schema_type=schema_type, diagnostics=diagnostics)

    def _to_diagnostic(self, index: TextIndex, error: ValidationError, schema_type: SchemaType) -> lsp.Diagnostic:
        return lsp.Diagnostic(
            range=self._find_error_range(index, error),
            message=format_error_message(error),
            severity=lsp.DiagnosticSeverity.Error,
            code=str(error.validator),
            source=f"acp-schema-{schema_type.value}",
        )

    def _find_error_range(self, index: TextIndex, error: ValidationError) -> lsp.Range:
        """Best-effort location of an error: the first occurrence of the offending key."""
        path = [str(p) for p in error.absolute_path]

        if path:
            found = _find_key(index, path[-1])
            if found is not None:
                return found

        # For 'required' errors, fall back to the parent object's key
        if error.validator == 'required' and len(path) > 1:
            found = _find_key(index, path[-2])
            if found is not None:
                return found

        first_line = index.line_text(0)
        return lsp.Range(
            start=lsp.Position(line=0, character=0),
            end=lsp.Position(line=0, character=min(_DEFAULT_RANGE_WIDTH, len(first_line))),
        )

    def _invalid_json(
        self, schema_type: SchemaType, index: TextIndex, reason: str, offset: Optional[int]
    ) -> ValidationResult:
        return ValidationResult(
            valid=False,
            schema_type=schema_type,
            diagnostics=[self._json_syntax_diagnostic(index, reason, offset)],
        )

    def _json_syntax_diagnostic(self, index: TextIndex, reason: str, offset: Optional[int]) -> lsp.Diagnostic:
        if offset is None:
            match = _JSON_ERROR_OFFSET.search(reason)
            offset = int(match.group(1)) if match else 0
        start = index.position_at(offset)

        return lsp.Diagnostic(
            range=lsp.Range(
                start=start,
                end=lsp.Position(line=start.line, character=start.character + _JSON_ERROR_WIDTH),
            ),
            message=f"Invalid JSON: {reason}",
            severity=lsp.DiagnosticSeverity.Error,
            code=JSON_DIAGNOSTIC_SOURCE,
            source=JSON_DIAGNOSTIC_SOURCE,
        )


def format_error_message(error: ValidationError) -> str:
    """Format a jsonschema error into a human-readable message."""
    path = _instance_pointer(error) or 'root'
    keyword = error.validator

    if keyword == 'required':
        return f"Missing required property: {_missing_property(error)}"
    if keyword == 'type':
        expected = error.validator_value
        if isinstance(expected, list):
            expected = ' | '.join(str(t) for t in expected)
        return f"{path}: Expected {expected}"
    if keyword == 'enum':
        return f"{path}: Must be one of: {', '.join(str(v) for v in error.validator_value)}"
    if keyword == 'additionalProperties':
        return f"{path}: Unknown property: {', '.join(_additional_properties(error))}"
    return f"{path}: {error.message}"


def _instance_pointer(error: ValidationError) -> str:
    if not error.absolute_path:
        return ''
    return '/' + '/'.join(str(p) for p in error.absolute_path)


def _missing_property(error: ValidationError) -> str:
    match = _REQUIRED_MESSAGE.match(error.message)
    if match:
        return match.group(2)
    if isinstance(error.instance, dict) and isinstance(error.validator_value, list):
        missing = [p for p in error.validator_value if p not in error.instance]
        if missing:
            return str(missing[0])
    return error.message


def _additional_properties(error: ValidationError) -> List[str]:
    if not isinstance(error.instance, dict):
        return []
    properties = error.schema.get('properties', {}) if isinstance(error.schema, dict) else {}
    patterns = error.schema.get('patternProperties', {}) if isinstance(error.schema, dict) else {}
    return [
        str(key) for key in error.instance
        if key not in properties and not any(re.search(p, key) for p in patterns)
    ]


def _find_key(index: TextIndex, key: str) -> Optional[lsp.Range]:
    needle = f'"{key}"'
    idx = index.text.find(needle)
    if idx == -1:
        return None
    return index.range_at(idx, idx + len(needle))
