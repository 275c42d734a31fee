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

"""Annotation parser for ACP directives embedded in source comments."""

import logging
import re
from typing import List, Optional, Tuple

from lsprotocol import types as lsp

from ..utils.text_utils import TextIndex
from .catalog import MARKER, AnnotationCategory, get_category
from .comments import extract_comments
from .types import (
    DIAGNOSTIC_SOURCE,
    Annotation,
    AnnotationDiagnosticCode,
    CommentSpan,
    ParseResult,
    VariableReference,
)
from .validator import validate_annotation

logger = logging.getLogger(__name__)


# Marker, namespace, then everything up to (not including) the next marker
ANNOTATION_PATTERN = re.compile(r'@acp:([A-Za-z0-9_-]+)((?:(?!@acp:).)*)', re.DOTALL)

VARIABLE_REF_PATTERN = re.compile(r'\$([A-Z][A-Z0-9_]*)(?:\.(full|ref|signature)\b)?')

QUOTED_STRING_PATTERN = re.compile(r'^(["\'])(.*)\1$', re.DOTALL)

# Trailing " * " continuation lines picked up at the end of a block comment
_TRAILING_DECORATION = re.compile(r'(?:\s*\n[ \t]*\*+)+$')

_LEADING_DECORATION = re.compile(r'^\s*\*+\s?')

DESCRIPTION_SEPARATOR = ' - '


class AnnotationParser:
    """Parses ACP annotations out of a document's comments.

    The parser keeps no state between calls; parsing the same text twice
    gives equal results.
    """

    def parse(self, text: str, language_id: str) -> ParseResult:
        """Parse and validate every annotation in a document.

        Args:
            text: Full document text
            language_id: Language identifier with registered comment syntax

        Returns:
            ParseResult with the annotations in document order and the
            comment spans they came from
        """
        if MARKER not in text:
            return ParseResult()

        comments = extract_comments(text, language_id)
        if not comments:
            return ParseResult()

        index = TextIndex(text)
        annotations: List[Annotation] = []
        for comment in comments:
            annotations.extend(self.parse_comment(comment, index))

        logger.debug(f"Parsed {len(annotations)} annotations from {len(comments)} comments")
        return ParseResult(annotations=annotations, comments=comments)

    def parse_comment(self, comment: CommentSpan, index: TextIndex) -> List[Annotation]:
        """Parse all annotations of a single comment span."""
        annotations = []
        for match in ANNOTATION_PATTERN.finditer(comment.content):
            annotation = self._build_annotation(match, comment, index)
            annotation.diagnostics.extend(validate_annotation(annotation))
            annotations.append(annotation)
        return annotations

    def _build_annotation(self, match: re.Match, comment: CommentSpan, index: TextIndex) -> Annotation:
        namespace = match.group(1)
        raw = match.group(0).rstrip()
        if comment.kind == 'block':
            raw = _TRAILING_DECORATION.sub('', raw).rstrip()

        start = comment.content_start + match.start()
        annotation_range = index.range_at(start, start + len(raw))

        category = get_category(namespace)
        diagnostics: List[lsp.Diagnostic] = []
        if category is None:
            category = AnnotationCategory.INLINE
            diagnostics.append(lsp.Diagnostic(
                range=annotation_range,
                message=f"Unknown namespace '{namespace}'",
                severity=lsp.DiagnosticSeverity.Warning,
                code=AnnotationDiagnosticCode.UNKNOWN_NAMESPACE,
                source=DIAGNOSTIC_SOURCE,
            ))

        body = raw[len(MARKER) + len(namespace):]
        if comment.kind == 'block':
            body = _join_continuation_lines(body)
        value, description, metadata = parse_directive_body(body)

        return Annotation(
            raw=raw,
            namespace=namespace,
            category=category,
            range=annotation_range,
            offset=start,
            value=value,
            description=description,
            metadata=metadata,
            variable_references=extract_variable_references(raw, start, index),
            diagnostics=diagnostics,
        )


def parse_directive_body(body: str) -> Tuple[Optional[str], Optional[str], List[str]]:
    """Split a directive body into value, description and metadata tags.

    ``value - description | tag | tag``; the description and the tags are
    optional. A body that cannot be split degrades to a bare value.
    """
    main, *tags = body.split('|')
    metadata = [tag.strip() for tag in tags if tag.strip()]

    main = main.strip()
    value: Optional[str] = None
    description: Optional[str] = None

    separator = main.find(DESCRIPTION_SEPARATOR)
    if separator != -1:
        value = main[:separator].strip()
        description = main[separator + len(DESCRIPTION_SEPARATOR):].strip()
    elif main:
        value = main

    if value:
        value = _unwrap_value(value)

    return value or None, description or None, metadata


def extract_variable_references(raw: str, start: int, index: TextIndex) -> List[VariableReference]:
    """Extract $VARIABLE and $VARIABLE.modifier references from annotation text."""
    refs = []
    for match in VARIABLE_REF_PATTERN.finditer(raw):
        refs.append(VariableReference(
            raw=match.group(0),
            name=match.group(1),
            modifier=match.group(2),
            offset=match.start(),
            range=index.range_at(start + match.start(), start + match.end()),
        ))
    return refs


def _join_continuation_lines(body: str) -> str:
    lines = body.split('\n')
    cleaned = [lines[0].strip()]
    for line in lines[1:]:
        cleaned.append(_LEADING_DECORATION.sub('', line).strip())
    return ' '.join(part for part in cleaned if part)


def _unwrap_value(value: str) -> str:
    """Strip ("...") wrapping and unescape quoted values."""
    if len(value) >= 2 and value[0] == '(' and value[-1] == ')':
        value = value[1:-1].strip()
    quoted = QUOTED_STRING_PATTERN.match(value)
    if quoted:
        value = quoted.group(2).replace('\\"', '"').replace("\\'", "'").replace('\\\\', '\\')
    return value
