"""Tests for per-document metadata."""

from __future__ import annotations

from acp_lsp.documents.manager import DocumentManager
from acp_lsp.schema import SchemaType

from conftest import snapshot


class TestDocumentManager:
    def test_classifies_source_file(self) -> None:
        manager = DocumentManager()
        metadata = manager.initialize_document(snapshot("file:///src/a.ts", "// @acp:lock frozen\n"))
        assert metadata.language_id == "typescript"
        assert metadata.supports_annotations
        assert metadata.has_annotations
        assert not metadata.is_schema_document
        assert manager.is_acp_relevant("file:///src/a.ts")

    def test_classifies_schema_document(self) -> None:
        manager = DocumentManager()
        metadata = manager.initialize_document(snapshot("file:///repo/.acp.config.json", "{}", language_id="json"))
        assert metadata.schema_type is SchemaType.CONFIG
        assert metadata.is_acp_config
        assert not metadata.is_acp_cache
        assert manager.schema_document_uris() == ["file:///repo/.acp.config.json"]

    def test_unrelated_document(self) -> None:
        manager = DocumentManager()
        manager.initialize_document(snapshot("file:///notes.md", "@acp:lock frozen", language_id="markdown"))
        assert not manager.is_acp_relevant("file:///notes.md")
        assert not manager.is_acp_relevant("file:///never-opened.ts")

    def test_change_updates_version_and_marker_flag(self) -> None:
        manager = DocumentManager()
        manager.initialize_document(snapshot("file:///src/a.py", "x = 1\n"))
        assert manager.annotated_uris() == []
        metadata = manager.on_document_change(snapshot("file:///src/a.py", "# @acp:todo\n", version=2))
        assert metadata.version == 2
        assert metadata.has_annotations
        assert manager.annotated_uris() == ["file:///src/a.py"]

    def test_change_drops_cached_annotations(self) -> None:
        manager = DocumentManager()
        manager.initialize_document(snapshot("file:///src/a.py", "# @acp:todo\n"))
        manager.set_cached_annotations("file:///src/a.py", [], version=1)
        assert manager.get_cached_annotations("file:///src/a.py", 1) == []
        manager.on_document_change(snapshot("file:///src/a.py", "# @acp:todo later\n", version=2))
        assert manager.get_cached_annotations("file:///src/a.py", 1) is None
        assert manager.get_cached_annotations("file:///src/a.py", 2) is None

    def test_validation_marker(self) -> None:
        manager = DocumentManager()
        document = snapshot("file:///src/a.go", "// @acp:lock frozen\n", version=4)
        manager.initialize_document(document)
        assert manager.needs_revalidation(document)
        manager.mark_validated(document.uri, 4)
        assert not manager.needs_revalidation(document)
        assert manager.get_metadata(document.uri).last_validated_at is not None

    def test_refresh_keeps_validation_marker(self) -> None:
        manager = DocumentManager()
        document = snapshot("file:///src/a.go", "// @acp:lock frozen\n", version=4)
        manager.initialize_document(document)
        manager.mark_validated(document.uri, 4)
        metadata = manager.refresh_classification(document)
        assert metadata.last_validated_version == 4

    def test_handed_out_metadata_is_not_mutated(self) -> None:
        manager = DocumentManager()
        before = manager.initialize_document(snapshot("file:///src/a.ts", "", version=1))
        manager.on_document_change(snapshot("file:///src/a.ts", "// @acp:todo\n", version=2))
        assert before.version == 1
        assert not before.has_annotations

    def test_close_removes_metadata(self) -> None:
        manager = DocumentManager()
        manager.initialize_document(snapshot("file:///src/a.ts", ""))
        manager.on_document_close("file:///src/a.ts")
        manager.on_document_close("file:///src/a.ts")
        assert manager.get_metadata("file:///src/a.ts") is None
        assert manager.all_metadata() == []

    def test_refresh_after_close_does_not_track_again(self) -> None:
        manager = DocumentManager()
        document = snapshot("file:///src/a.ts", "// @acp:lock frozen\n")
        manager.initialize_document(document)
        manager.on_document_close(document.uri)
        metadata = manager.refresh_classification(document)
        assert metadata.has_annotations
        assert manager.get_metadata(document.uri) is None
        assert manager.annotated_uris() == []
