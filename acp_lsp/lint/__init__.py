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

"""Command-line linting of annotated sources and ACP JSON artifacts."""

import logging
from pathlib import Path
from typing import List, Optional

from ..annotations import AnnotationParser
from ..diagnostics import DiagnosticsPublisher
from ..documents import DocumentSnapshot
from ..documents.manager import DocumentManager
from ..schema import SchemaRegistry, SchemaValidator
from ..utils.uri_utils import path_to_uri
from .report import LintResult

__all__ = ['lint_files', 'LintResult']

logger = logging.getLogger(__name__)


def lint_files(file_paths: List[Path], schema_registry: Optional[SchemaRegistry] = None) -> List[LintResult]:
    """Lint a list of files with the same checks the language server runs.

    Args:
        file_paths: List of file paths to lint
        schema_registry: Compiled schemas; the bundled ones when omitted

    Returns:
        List of LintResult objects, one per file
    """
    results = []

    collected = {}
    document_manager = DocumentManager()
    publisher = DiagnosticsPublisher(
        SchemaValidator(schema_registry),
        AnnotationParser(),
        document_manager,
        sink=lambda uri, diagnostics: collected.__setitem__(uri, diagnostics),
    )

    for file_path in file_paths:
        result = LintResult(file_path)
        uri = path_to_uri(str(file_path.resolve()))

        try:
            text = file_path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            result.add_error(f"Failed to read file: {e}")
            results.append(result)
            continue

        document = DocumentSnapshot(uri=uri, text=text)
        try:
            document_manager.initialize_document(document)
            publisher.validate(document)
            for diagnostic in collected.pop(uri, []):
                result.add_diagnostic(diagnostic)
        except Exception as e:
            result.add_error(f"Unexpected error during linting: {str(e)}")
        finally:
            document_manager.on_document_close(uri)

        logger.debug(f"{file_path}: {len(result.errors)} errors, {len(result.warnings)} warnings")
        results.append(result)

    return results
