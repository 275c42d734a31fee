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

"""Text utility functions."""

from bisect import bisect_right
from typing import List

from lsprotocol import types as lsp


def utf16_length(text: str) -> int:
    """Number of UTF-16 code units needed to encode text."""
    return len(text) + sum(1 for ch in text if ord(ch) > 0xFFFF)


class TextIndex:
    """Maps string offsets of a document to LSP positions.

    LSP columns are counted in UTF-16 code units, Python strings in code
    points, so characters outside the basic multilingual plane count twice.
    """

    def __init__(self, text: str):
        self.text = text
        self._line_starts: List[int] = [0]
        for idx, ch in enumerate(text):
            if ch == '\n':
                self._line_starts.append(idx + 1)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_text(self, line: int) -> str:
        """Get the text of a line without its line terminator."""
        if line < 0 or line >= len(self._line_starts):
            return ""
        start = self._line_starts[line]
        end = self._line_starts[line + 1] - 1 if line + 1 < len(self._line_starts) else len(self.text)
        return self.text[start:end].rstrip('\r')

    def position_at(self, offset: int) -> lsp.Position:
        """Convert a string offset to a Position."""
        offset = max(0, min(offset, len(self.text)))
        line = bisect_right(self._line_starts, offset) - 1
        line_start = self._line_starts[line]
        return lsp.Position(line=line, character=utf16_length(self.text[line_start:offset]))

    def range_at(self, start: int, end: int) -> lsp.Range:
        """Create a Range from start and end offsets."""
        return lsp.Range(start=self.position_at(start), end=self.position_at(end))

