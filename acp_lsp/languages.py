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

"""Language detection and comment syntax for annotated source files."""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Dict, Optional, Tuple

from .utils.uri_utils import uri_to_path


@dataclass(frozen=True)
class CommentSyntax:
    """Comment delimiters of a language."""

    line: Optional[str]
    blocks: Tuple[Tuple[str, str], ...] = ()


_C_STYLE = CommentSyntax(line='//', blocks=(('/*', '*/'),))
_PYTHON = CommentSyntax(line='#', blocks=(('"""', '"""'), ("'''", "'''")))

COMMENT_SYNTAX: Dict[str, CommentSyntax] = {
    'typescript': _C_STYLE,
    'typescriptreact': _C_STYLE,
    'javascript': _C_STYLE,
    'javascriptreact': _C_STYLE,
    'python': _PYTHON,
    'rust': _C_STYLE,
    'go': _C_STYLE,
    'java': _C_STYLE,
    'csharp': _C_STYLE,
    'cpp': _C_STYLE,
    'c': _C_STYLE,
}

LANGUAGE_EXTENSIONS: Dict[str, Tuple[str, ...]] = {
    'typescript': ('.ts', '.mts', '.cts'),
    'typescriptreact': ('.tsx',),
    'javascript': ('.js', '.mjs', '.cjs'),
    'javascriptreact': ('.jsx',),
    'python': ('.py', '.pyi'),
    'rust': ('.rs',),
    'go': ('.go',),
    'java': ('.java',),
    'csharp': ('.cs',),
    'cpp': ('.cpp', '.hpp', '.cc', '.hh', '.cxx'),
    'c': ('.c', '.h'),
}

_EXTENSION_LANGUAGE_MAP: Dict[str, str] = {
    ext: language
    for language, extensions in LANGUAGE_EXTENSIONS.items()
    for ext in extensions
}


def language_from_path(path: str) -> Optional[str]:
    """Get the language identifier from a file extension."""
    return _EXTENSION_LANGUAGE_MAP.get(PurePosixPath(path).suffix.lower())


def resolve_language(uri: str, language_id: Optional[str] = None) -> Optional[str]:
    """Prefer the client's language id, falling back to the file extension."""
    if language_id and language_id in COMMENT_SYNTAX:
        return language_id
    detected = language_from_path(uri_to_path(uri))
    return detected or language_id


def is_annotation_supported(language_id: Optional[str]) -> bool:
    """Check if a language has registered comment syntax."""
    return language_id in COMMENT_SYNTAX


def get_comment_syntax(language_id: str) -> Optional[CommentSyntax]:
    return COMMENT_SYNTAX.get(language_id)
