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

"""URI utility functions."""

from pathlib import PurePosixPath
from urllib.parse import quote, unquote, urlparse


def uri_to_path(uri: str) -> str:
    """Convert URI to file path."""
    parsed = urlparse(uri)
    if not parsed.scheme:
        return uri
    return unquote(parsed.path)


def path_to_uri(path: str) -> str:
    """Convert file path to URI."""
    return f"file://{quote(path)}"


def uri_filename(uri: str) -> str:
    """Get the final path segment of a URI."""
    return PurePosixPath(uri_to_path(uri)).name
