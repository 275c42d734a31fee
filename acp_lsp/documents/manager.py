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

"""Per-document metadata for open documents."""

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from ..annotations.catalog import MARKER
from ..annotations.types import Annotation
from ..languages import is_annotation_supported, resolve_language
from ..schema.registry import SchemaType
from ..schema.validator import detect_schema_type
from .snapshot import DocumentSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentMetadata:
    uri: str
    language_id: Optional[str]
    version: int
    schema_type: Optional[SchemaType] = None
    has_annotations: bool = False
    last_validated_version: Optional[int] = None
    last_validated_at: Optional[float] = None
    annotations: Optional[List[Annotation]] = field(default=None, compare=False)
    annotations_version: Optional[int] = None

    @property
    def is_acp_config(self) -> bool:
        return self.schema_type == SchemaType.CONFIG

    @property
    def is_acp_cache(self) -> bool:
        return self.schema_type == SchemaType.CACHE

    @property
    def is_acp_vars(self) -> bool:
        return self.schema_type == SchemaType.VARS

    @property
    def is_schema_document(self) -> bool:
        return self.schema_type is not None

    @property
    def supports_annotations(self) -> bool:
        return is_annotation_supported(self.language_id)


class DocumentManager:
    """Tracks classification and annotation state of open documents.

    Entries are replaced, never mutated in place, so a DocumentMetadata handed
    out earlier keeps describing the version it was created for.
    """

    def __init__(self):
        self._metadata: Dict[str, DocumentMetadata] = {}

    def get_metadata(self, uri: str) -> Optional[DocumentMetadata]:
        return self._metadata.get(uri)

    def all_metadata(self) -> List[DocumentMetadata]:
        return list(self._metadata.values())

    def initialize_document(self, document: DocumentSnapshot) -> DocumentMetadata:
        """Create metadata for a newly opened document."""
        metadata = self._classify(document)
        self._metadata[document.uri] = metadata
        logger.debug(
            f"Initialized document: {document.uri} (language={metadata.language_id}, "
            f"schema={metadata.schema_type.value if metadata.schema_type else None}, "
            f"annotations={metadata.has_annotations})"
        )
        return metadata

    def on_document_change(self, document: DocumentSnapshot) -> DocumentMetadata:
        """Update metadata after a content change; cached annotations are dropped."""
        existing = self._metadata.get(document.uri)
        if existing is None:
            return self.initialize_document(document)

        metadata = replace(
            existing,
            version=document.version,
            has_annotations=MARKER in document.text,
            annotations=None,
            annotations_version=None,
        )
        self._metadata[document.uri] = metadata
        return metadata

    def refresh_classification(self, document: DocumentSnapshot) -> DocumentMetadata:
        """Re-derive language, schema type and annotation presence from a snapshot.

        Only documents that are already tracked are stored; a closed uri stays untracked.
        """
        existing = self._metadata.get(document.uri)
        classified = self._classify(document)
        if existing is None:
            return classified
        keep_cache = existing.annotations_version == document.version
        classified = replace(
            classified,
            last_validated_version=existing.last_validated_version,
            last_validated_at=existing.last_validated_at,
            annotations=existing.annotations if keep_cache else None,
            annotations_version=existing.annotations_version if keep_cache else None,
        )
        self._metadata[document.uri] = classified
        return classified

    def on_document_close(self, uri: str):
        """Handle document close."""
        if self._metadata.pop(uri, None) is not None:
            logger.debug(f"Closed document: {uri}")

    def is_acp_relevant(self, uri: str) -> bool:
        """Check if a document is either annotated source or an ACP JSON artifact."""
        metadata = self._metadata.get(uri)
        if metadata is None:
            return False
        return metadata.supports_annotations or metadata.is_schema_document

    def annotated_uris(self) -> List[str]:
        """URIs of all open documents that contain the annotation marker."""
        return [uri for uri, metadata in self._metadata.items() if metadata.has_annotations]

    def schema_document_uris(self) -> List[str]:
        """URIs of all open ACP JSON artifacts."""
        return [uri for uri, metadata in self._metadata.items() if metadata.is_schema_document]

    def set_cached_annotations(self, uri: str, annotations: List[Annotation], version: int):
        metadata = self._metadata.get(uri)
        if metadata is not None:
            self._metadata[uri] = replace(metadata, annotations=list(annotations), annotations_version=version)

    def get_cached_annotations(self, uri: str, version: int) -> Optional[List[Annotation]]:
        """Get cached annotations if they were parsed from the given version."""
        metadata = self._metadata.get(uri)
        if metadata is not None and metadata.annotations is not None and metadata.annotations_version == version:
            return metadata.annotations
        return None

    def needs_revalidation(self, document: DocumentSnapshot) -> bool:
        """Check if the document changed since it was last validated."""
        metadata = self._metadata.get(document.uri)
        return metadata is None or metadata.last_validated_version != document.version

    def mark_validated(self, uri: str, version: int):
        metadata = self._metadata.get(uri)
        if metadata is not None:
            self._metadata[uri] = replace(
                metadata,
                last_validated_version=version,
                last_validated_at=time.time(),
            )

    def _classify(self, document: DocumentSnapshot) -> DocumentMetadata:
        return DocumentMetadata(
            uri=document.uri,
            language_id=resolve_language(document.uri, document.language_id),
            version=document.version,
            schema_type=detect_schema_type(document.uri),
            has_annotations=MARKER in document.text,
        )
