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

import logging
from typing import Any, Callable, List, Mapping, Optional

from pygls.server import LanguageServer
from lsprotocol import types as lsp

from . import __version__
from .annotations import AnnotationParser
from .configuration import SETTINGS_SECTION, ConfigurationStore
from .diagnostics import DiagnosticsPublisher
from .documents import DocumentSnapshot
from .documents.manager import DocumentManager
from .documents.sync import DocumentSyncHandler
from .schema import SchemaRegistry, SchemaValidator
from .utils.logging_utils import level_for_trace

logger = logging.getLogger(__name__)


class AcpLanguageServer:
    """Main language server class for ACP annotations and JSON artifacts."""

    def __init__(self, schema_registry: Optional[SchemaRegistry] = None):
        self.server = LanguageServer(
            "acp-lsp",
            __version__,
            text_document_sync_kind=lsp.TextDocumentSyncKind.Incremental,
        )
        self.configuration = ConfigurationStore()

        # Initialize components
        self.document_manager = DocumentManager()
        self.schema_validator = SchemaValidator(schema_registry)
        self.parser = AnnotationParser()
        self.publisher = DiagnosticsPublisher(
            self.schema_validator,
            self.parser,
            self.document_manager,
            sink=self._publish,
            settings=lambda: self.configuration.settings,
        )
        self.sync = DocumentSyncHandler(
            self.document_manager,
            on_validate=self.publisher.validate,
            get_document=self._get_snapshot,
            settings=lambda: self.configuration.settings,
            call_later=self._call_later,
        )

        # Register handlers
        self._register_handlers()

    def _register_handlers(self):
        """Register all LSP handlers."""

        @self.server.feature(lsp.INITIALIZED)
        async def initialized(ls, params):
            await self._on_initialized(ls, params)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
        def did_open(ls, params):
            self._on_text_document_did_open(ls, params)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
        def did_change(ls, params):
            self._on_text_document_did_change(ls, params)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
        def did_save(ls, params):
            self._on_text_document_did_save(ls, params)

        @self.server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
        def did_close(ls, params):
            self._on_text_document_did_close(ls, params)

        @self.server.feature(lsp.WORKSPACE_DID_CHANGE_CONFIGURATION)
        async def did_change_configuration(ls, params):
            await self._on_workspace_did_change_configuration(ls, params)

        @self.server.feature(lsp.SHUTDOWN)
        def shutdown(ls, params):
            self._on_shutdown(ls, params)

    def start_io(self):
        """Start the language server over stdio."""
        self.server.start_io()

    def start_tcp(self, host: str, port: int):
        """Start the language server on a TCP socket."""
        self.server.start_tcp(host, port)

    async def _on_initialized(self, ls, params: lsp.InitializedParams):
        """Fetch client settings once the handshake is done."""
        logger.info(f"ACP language server {__version__} initialized")
        await self._pull_configuration()

    def _on_text_document_did_open(self, ls, params: lsp.DidOpenTextDocumentParams):
        """Handle document open event."""
        item = params.text_document
        self.sync.handle_open(DocumentSnapshot(
            uri=item.uri,
            text=item.text,
            version=item.version,
            language_id=item.language_id,
        ))

    def _on_text_document_did_change(self, ls, params: lsp.DidChangeTextDocumentParams):
        """Handle document change event."""
        snapshot = self._get_snapshot(params.text_document.uri)
        if snapshot is not None:
            self.sync.handle_change(snapshot)

    def _on_text_document_did_save(self, ls, params: lsp.DidSaveTextDocumentParams):
        """Handle document save event."""
        snapshot = self._get_snapshot(params.text_document.uri)
        if snapshot is not None:
            self.sync.handle_save(snapshot)

    def _on_text_document_did_close(self, ls, params: lsp.DidCloseTextDocumentParams):
        """Handle document close event."""
        uri = params.text_document.uri
        self.sync.handle_close(uri)
        self.publisher.clear(uri)

    async def _on_workspace_did_change_configuration(self, ls, params: lsp.DidChangeConfigurationParams):
        """Apply new settings and re-validate all open documents."""
        settings = params.settings
        if isinstance(settings, Mapping) and SETTINGS_SECTION in settings:
            self._apply_settings(settings[SETTINGS_SECTION])
        else:
            await self._pull_configuration()
        self._revalidate_open_documents()

    def _on_shutdown(self, ls, params):
        """Cancel pending validations before the process exits."""
        self.sync.cancel_all()

    async def _pull_configuration(self):
        try:
            result = await self.server.get_configuration_async(
                lsp.WorkspaceConfigurationParams(items=[lsp.ConfigurationItem(section=SETTINGS_SECTION)])
            )
        except Exception as e:
            logger.warning(f"Failed to fetch settings, keeping current values: {e}")
            return
        if result:
            self._apply_settings(result[0])

    def _apply_settings(self, payload: Any):
        settings = self.configuration.update(payload)
        logging.getLogger('acp_lsp').setLevel(level_for_trace(settings.trace))

    def _revalidate_open_documents(self):
        """Re-validate all open documents."""
        if not self.configuration.settings.validation.enabled:
            self.sync.cancel_all()
            return
        try:
            for uri in list(self.server.workspace.text_documents):
                snapshot = self._get_snapshot(uri)
                if snapshot is not None:
                    self.sync.cancel_validation(uri)
                    self.publisher.validate(snapshot)
        except Exception as e:
            logger.error(f"Failed to revalidate open documents: {e}")

    def _get_snapshot(self, uri: str) -> Optional[DocumentSnapshot]:
        """Current text of an open document, or None once it is closed."""
        if uri not in self.server.workspace.text_documents:
            return None
        document = self.server.workspace.get_text_document(uri)
        return DocumentSnapshot(
            uri=uri,
            text=document.source,
            version=document.version or 0,
            language_id=document.language_id,
        )

    def _publish(self, uri: str, diagnostics: List[lsp.Diagnostic]):
        self.server.publish_diagnostics(uri, diagnostics)

    def _call_later(self, delay: float, callback: Callable[[], None]):
        return self.server.loop.call_later(delay, callback)
