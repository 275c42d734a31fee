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

"""Collects schema and annotation diagnostics for a document and publishes them."""

import logging
from typing import Callable, List, Optional

from lsprotocol import types as lsp

from .annotations import MARKER, Annotation, AnnotationParser, VariableReference
from .configuration import DEFAULT_SETTINGS, AcpSettings
from .documents import DocumentSnapshot
from .documents.manager import DocumentManager
from .schema import SchemaValidator

logger = logging.getLogger(__name__)


DiagnosticsSink = Callable[[str, List[lsp.Diagnostic]], None]
ReferenceSink = Callable[[str, List[VariableReference]], None]


class DiagnosticsPublisher:
    """Runs every applicable validator on a document and publishes the result.

    Schema diagnostics come first, followed by annotation diagnostics. Each
    publish replaces the previous set for the URI.
    """

    def __init__(
        self,
        schema_validator: SchemaValidator,
        parser: AnnotationParser,
        document_manager: DocumentManager,
        sink: DiagnosticsSink,
        settings: Callable[[], AcpSettings] = lambda: DEFAULT_SETTINGS,
        reference_sink: Optional[ReferenceSink] = None,
    ):
        self.schema_validator = schema_validator
        self.parser = parser
        self.document_manager = document_manager
        self._sink = sink
        self._settings = settings
        self._reference_sink = reference_sink

    def validate(self, document: DocumentSnapshot) -> List[lsp.Diagnostic]:
        """Validate a document and publish its diagnostics.

        Args:
            document: Snapshot holding the text to validate

        Returns:
            The published diagnostics
        """
        metadata = self.document_manager.refresh_classification(document)

        if not self._settings().diagnostics.enabled:
            self.publish(document.uri, [])
            return []

        diagnostics: List[lsp.Diagnostic] = []

        if metadata.is_schema_document:
            try:
                diagnostics.extend(self.schema_validator.validate(document).diagnostics)
            except Exception as e:
                logger.warning(f"Schema validation failed for {document.uri}: {e}")

        if metadata.supports_annotations and MARKER in document.text:
            try:
                annotations = self._annotations_for(document, metadata.language_id)
                for annotation in annotations:
                    diagnostics.extend(annotation.diagnostics)
                self._forward_references(document.uri, annotations)
            except Exception as e:
                logger.warning(f"Annotation validation failed for {document.uri}: {e}")

        self.publish(document.uri, diagnostics)
        self.document_manager.mark_validated(document.uri, document.version)
        return diagnostics

    def clear(self, uri: str):
        """Remove all diagnostics for a document."""
        self.publish(uri, [])

    def publish(self, uri: str, diagnostics: List[lsp.Diagnostic]):
        try:
            logger.debug(f"Publishing {len(diagnostics)} diagnostics for {uri}")
            self._sink(uri, diagnostics)
        except Exception as e:
            logger.error(f"Failed to publish diagnostics {uri}: {e}")

    def _annotations_for(self, document: DocumentSnapshot, language_id: str) -> List[Annotation]:
        cached = self.document_manager.get_cached_annotations(document.uri, document.version)
        if cached is not None:
            return cached
        annotations = self.parser.parse(document.text, language_id).annotations
        self.document_manager.set_cached_annotations(document.uri, annotations, document.version)
        return annotations

    def _forward_references(self, uri: str, annotations: List[Annotation]):
        if self._reference_sink is None:
            return
        references = [ref for annotation in annotations for ref in annotation.variable_references]
        self._reference_sink(uri, references)
