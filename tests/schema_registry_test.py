"""Tests for start-up compilation of the bundled schemas."""

from __future__ import annotations

from pathlib import Path

import pytest

from acp_lsp.exceptions import SchemaLoadError
from acp_lsp.schema import loader as schema_loader
from acp_lsp.schema import SchemaRegistry, SchemaType, get_schema_path, load_schema


class TestBundledSchemas:
    def test_every_type_compiles(self, registry: SchemaRegistry) -> None:
        assert registry.available_types == list(SchemaType)
        assert registry.failures == {}

    @pytest.mark.parametrize("schema_type", list(SchemaType))
    def test_schema_files_exist(self, schema_type: SchemaType) -> None:
        path = get_schema_path(schema_type.value)
        assert path.name == f"{schema_type.value}.schema.json"
        assert path.is_file()

    def test_loader_caches_documents(self) -> None:
        assert load_schema("config") is load_schema("config")

    def test_missing_schema_file(self) -> None:
        with pytest.raises(SchemaLoadError):
            load_schema("config", version="v0")

    def test_undecodable_schema_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "latin.schema.json"
        path.write_bytes(b"\xff\xfe{")
        monkeypatch.setattr(schema_loader, "get_schema_path", lambda schema_type, version="v1": path)
        with pytest.raises(SchemaLoadError, match="not valid UTF-8"):
            load_schema("latin")

    def test_cross_schema_reference_validates(self, registry: SchemaRegistry) -> None:
        validator = registry.get_validator(SchemaType.CACHE)
        assert validator is not None
        schema = registry.get_schema(SchemaType.CACHE)
        assert schema is not None and "https://acp-protocol.dev/schemas/v1/config.schema.json" in str(schema)


class TestCompilationFailures:
    def test_invalid_schema_disables_only_its_type(self) -> None:
        registry = SchemaRegistry(schemas={SchemaType.PRIMER: {"type": 12}})
        assert not registry.is_available(SchemaType.PRIMER)
        assert registry.get_validator(SchemaType.PRIMER) is None
        assert SchemaType.PRIMER in registry.failures
        assert registry.is_available(SchemaType.CONFIG)
        assert len(registry.available_types) == len(SchemaType) - 1

    def test_unresolvable_reference_disables_type(self) -> None:
        broken = {
            "$schema": "https://json-schema.org/draft/2020-12/schema",
            "$id": "https://acp-protocol.dev/schemas/v1/primer.schema.json",
            "$ref": "https://acp-protocol.dev/schemas/v1/missing.schema.json",
        }
        registry = SchemaRegistry(schemas={SchemaType.PRIMER: broken})
        assert not registry.is_available(SchemaType.PRIMER)
        assert "missing.schema.json" in registry.failures[SchemaType.PRIMER]

    def test_loader_failure_is_contained(self) -> None:
        def loader(name: str) -> dict:
            if name == "sync":
                raise SchemaLoadError("gone")
            return load_schema(name)

        registry = SchemaRegistry(loader=loader)
        assert registry.failures == {SchemaType.SYNC: "gone"}
        assert registry.is_available(SchemaType.ATTEMPTS)

    def test_unexpected_loader_error_is_contained(self) -> None:
        def loader(name: str) -> dict:
            if name == "primer":
                raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
            return load_schema(name)

        registry = SchemaRegistry(loader=loader)
        assert list(registry.failures) == [SchemaType.PRIMER]
        assert "invalid start byte" in registry.failures[SchemaType.PRIMER]
        assert registry.available_types == [t for t in SchemaType if t is not SchemaType.PRIMER]
