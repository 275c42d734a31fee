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

"""Data types produced by the annotation parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from lsprotocol import types as lsp

from .catalog import AnnotationCategory


DIAGNOSTIC_SOURCE = 'acp'


class AnnotationDiagnosticCode:
    UNKNOWN_NAMESPACE = 'unknown-namespace'
    INVALID_LOCK_LEVEL = 'invalid-lock-level'
    INVALID_LAYER = 'invalid-layer'
    INVALID_STABILITY = 'invalid-stability'


@dataclass(frozen=True)
class CommentSpan:
    kind: str  # 'line' or 'block'
    start: int  # offset of the opening delimiter
    end: int  # offset just past the closing delimiter
    content_start: int  # offset of the first character after the opening delimiter
    content: str


@dataclass(frozen=True)
class VariableReference:
    raw: str
    name: str
    modifier: Optional[str]
    offset: int  # relative to the start of the annotation
    range: lsp.Range
    resolved: bool = False


@dataclass
class Annotation:
    raw: str
    namespace: str
    category: AnnotationCategory
    range: lsp.Range
    offset: int
    value: Optional[str] = None
    description: Optional[str] = None
    metadata: List[str] = field(default_factory=list)
    variable_references: List[VariableReference] = field(default_factory=list)
    diagnostics: List[lsp.Diagnostic] = field(default_factory=list)


@dataclass
class ParseResult:
    annotations: List[Annotation] = field(default_factory=list)
    comments: List[CommentSpan] = field(default_factory=list)

    @property
    def diagnostics(self) -> List[lsp.Diagnostic]:
        """All annotation diagnostics in document order."""
        return [d for annotation in self.annotations for d in annotation.diagnostics]
