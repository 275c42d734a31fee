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

"""Error reporting for the linter."""

from pathlib import Path
from typing import Any, Dict, List, Optional

from lsprotocol import types as lsp


class LintResult:
    """Container for linting results for a single file."""

    def __init__(self, file_path: Path):
        """Initialize lint result.

        Args:
            file_path: Path to the file being linted
        """
        self.file_path = file_path
        self.errors: List[Dict[str, Any]] = []
        self.warnings: List[Dict[str, Any]] = []

    def add_error(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        code: Optional[str] = None,
    ):
        """Add an error message.

        Args:
            message: Error message
            line: Optional 1-based line number where error occurred
            column: Optional 1-based column
            code: Optional diagnostic code
        """
        self.errors.append(_entry(message, line, column, code))

    def add_warning(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        code: Optional[str] = None,
    ):
        """Add a warning message."""
        self.warnings.append(_entry(message, line, column, code))

    def add_diagnostic(self, diagnostic: lsp.Diagnostic):
        """Record an LSP diagnostic; anything below Error counts as a warning."""
        line = diagnostic.range.start.line + 1
        column = diagnostic.range.start.character + 1
        code = str(diagnostic.code) if diagnostic.code is not None else None
        if diagnostic.severity == lsp.DiagnosticSeverity.Error:
            self.add_error(diagnostic.message, line, column, code)
        else:
            self.add_warning(diagnostic.message, line, column, code)


def _entry(message: str, line: Optional[int], column: Optional[int], code: Optional[str]) -> Dict[str, Any]:
    entry: Dict[str, Any] = {'message': message}
    if line is not None:
        entry['line'] = line
    if column is not None:
        entry['column'] = column
    if code is not None:
        entry['code'] = code
    return entry
