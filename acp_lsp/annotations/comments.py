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

"""Comment extraction for annotated source files."""

from typing import Dict, List, Optional, Tuple

from ..languages import CommentSyntax, get_comment_syntax
from .catalog import MARKER
from .types import CommentSpan


def extract_comments(text: str, language_id: str) -> List[CommentSpan]:
    """Extract comment spans that contain the annotation marker.

    The text is scanned once from left to right, so a line comment token
    inside a block comment (or the other way round) is part of the enclosing
    comment. An unterminated block comment runs to the end of the text.

    Args:
        text: Full document text
        language_id: Language identifier with registered comment syntax

    Returns:
        Comment spans in document order, only those whose content contains
        the marker
    """
    syntax = get_comment_syntax(language_id)
    if syntax is None or MARKER not in text:
        return []

    scanner = _DelimiterScanner(text, syntax)
    spans: List[CommentSpan] = []
    length = len(text)
    pos = 0

    while pos < length:
        found = scanner.next_opening(pos)
        if found is None:
            break
        start, opener, closer = found
        content_start = start + len(opener)

        if closer is None:
            end = text.find('\n', content_start)
            if end == -1:
                end = length
            content_end = end
            if content_end > content_start and text[content_end - 1] == '\r':
                content_end -= 1
            kind = 'line'
        else:
            close_idx = text.find(closer, content_start)
            if close_idx == -1:
                content_end = end = length
            else:
                content_end = close_idx
                end = close_idx + len(closer)
            kind = 'block'

        content = text[content_start:content_end]
        if MARKER in content:
            spans.append(CommentSpan(
                kind=kind,
                start=start,
                end=end,
                content_start=content_start,
                content=content,
            ))
        pos = max(end, start + 1)

    return spans


class _DelimiterScanner:
    """Finds the next opening delimiter, caching per-delimiter search results."""

    def __init__(self, text: str, syntax: CommentSyntax):
        self.text = text
        # (opener, closer); closer is None for line comments
        self.delimiters: List[Tuple[str, Optional[str]]] = []
        if syntax.line:
            self.delimiters.append((syntax.line, None))
        for opener, closer in syntax.blocks:
            self.delimiters.append((opener, closer))
        self._cache: Dict[str, int] = {}

    def _find(self, opener: str, pos: int) -> int:
        cached = self._cache.get(opener)
        if cached is None or (cached != -1 and cached < pos):
            cached = self.text.find(opener, pos)
            self._cache[opener] = cached
        return cached

    def next_opening(self, pos: int) -> Optional[Tuple[int, str, Optional[str]]]:
        best = None
        for opener, closer in self.delimiters:
            idx = self._find(opener, pos)
            if idx == -1:
                continue
            # Earliest wins, longer opener wins a tie
            if best is None or idx < best[0] or (idx == best[0] and len(opener) > len(best[1])):
                best = (idx, opener, closer)
        return best
