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

"""Document lifecycle handling with debounced validation."""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from ..configuration import DEFAULT_SETTINGS, AcpSettings
from .manager import DocumentManager
from .snapshot import DocumentSnapshot

logger = logging.getLogger(__name__)


# call_later(delay_seconds, callback) -> handle with cancel()
CallLater = Callable[[float, Callable[[], None]], Any]


def _loop_call_later(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class DocumentSyncHandler:
    """Handles document lifecycle events with debounced validation.

    Each document is either idle or has exactly one pending timer. A change
    replaces the pending timer, so rapid edits coalesce into one validation
    of the latest text. Saving validates immediately.
    """

    def __init__(
        self,
        document_manager: DocumentManager,
        on_validate: Callable[[DocumentSnapshot], None],
        get_document: Callable[[str], Optional[DocumentSnapshot]],
        settings: Callable[[], AcpSettings] = lambda: DEFAULT_SETTINGS,
        call_later: CallLater = _loop_call_later,
    ):
        """
        Args:
            document_manager: Metadata store updated on every event
            on_validate: Validates a snapshot and publishes the result
            get_document: Returns the current snapshot of an open document,
                or None once it is closed
            settings: Returns the current settings; read on every event
            call_later: Timer primitive of the host event loop
        """
        self.document_manager = document_manager
        self._on_validate = on_validate
        self._get_document = get_document
        self._settings = settings
        self._call_later = call_later
        self._pending: Dict[str, Any] = {}

    def handle_open(self, document: DocumentSnapshot):
        """Handle document opened event."""
        logger.debug(f"Opened {document.uri}")
        self.document_manager.initialize_document(document)
        if self._settings().validate_on_open:
            self.schedule_validation(document.uri)

    def handle_change(self, document: DocumentSnapshot):
        """Handle document content changed event."""
        logger.debug(f"Changed {document.uri} (v{document.version})")
        self.document_manager.on_document_change(document)
        self.cancel_validation(document.uri)
        if self._settings().validation.enabled:
            self.schedule_validation(document.uri)

    def handle_save(self, document: DocumentSnapshot):
        """Handle document saved event."""
        logger.debug(f"Saved {document.uri}")
        self.cancel_validation(document.uri)
        if self._settings().validate_on_save:
            self._validate(document)

    def handle_close(self, uri: str):
        """Handle document closed event."""
        logger.debug(f"Closed {uri}")
        self.cancel_validation(uri)
        self.document_manager.on_document_close(uri)

    def schedule_validation(self, uri: str):
        """Schedule validation after the debounce interval, replacing any pending one."""
        self.cancel_validation(uri)
        delay = self._settings().debounce_seconds
        self._pending[uri] = self._call_later(delay, lambda: self._fire(uri))

    def cancel_validation(self, uri: str):
        """Cancel a pending validation; no-op when nothing is pending."""
        handle = self._pending.pop(uri, None)
        if handle is not None:
            handle.cancel()

    def cancel_all(self):
        """Cancel all pending validations (e.g., on shutdown)."""
        for handle in self._pending.values():
            handle.cancel()
        self._pending.clear()
        logger.debug("Cancelled all pending validations")

    def is_pending(self, uri: str) -> bool:
        return uri in self._pending

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _fire(self, uri: str):
        self._pending.pop(uri, None)
        # Re-fetch so the latest text is validated
        document = self._get_document(uri)
        if document is None:
            logger.debug(f"Skipping validation of closed document {uri}")
            return
        self._validate(document)

    def _validate(self, document: DocumentSnapshot):
        try:
            self._on_validate(document)
        except Exception as e:
            logger.error(f"Validation failed for {document.uri}: {e}")
