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

"""JSON Schema loader for the bundled ACP artifact schemas."""

import json
from pathlib import Path
from typing import Dict

from ..exceptions import SchemaLoadError


SCHEMA_VERSION = "v1"

# Schema cache to avoid reloading files
_SCHEMA_CACHE: Dict[str, dict] = {}


def get_schema_path(schema_type: str, version: str = SCHEMA_VERSION) -> Path:
    """Get the path to a bundled JSON Schema file.

    Args:
        schema_type: Schema type (config, cache, vars, attempts, sync, primer)
        version: Schema directory name (e.g., "v1")

    Returns:
        Path to the schema file
    """
    schema_dir = Path(__file__).parent / version
    return schema_dir / f"{schema_type}.schema.json"


def load_schema(schema_type: str, version: str = SCHEMA_VERSION) -> dict:
    """Load a bundled JSON Schema file.

    Args:
        schema_type: Schema type (config, cache, vars, attempts, sync, primer)
        version: Schema directory name (e.g., "v1")

    Returns:
        Schema dictionary

    Raises:
        SchemaLoadError: If the schema file is missing, unreadable or not a
            JSON object
    """
    cache_key = f"{schema_type}-{version}"
    if cache_key in _SCHEMA_CACHE:
        return _SCHEMA_CACHE[cache_key]

    schema_path = get_schema_path(schema_type, version)
    if not schema_path.exists():
        raise SchemaLoadError(f"Schema file not found for {schema_type} ({version}): {schema_path}")

    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"Invalid JSON in schema file {schema_path}: {e.msg}") from e
    except UnicodeDecodeError as e:
        raise SchemaLoadError(f"Schema file {schema_path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise SchemaLoadError(f"Cannot read schema file {schema_path}: {e}") from e

    if not isinstance(schema, dict):
        raise SchemaLoadError(f"Schema file {schema_path} must contain a JSON object")

    _SCHEMA_CACHE[cache_key] = schema

    return schema


def clear_cache() -> None:
    """Clear the schema cache. Useful for testing."""
    _SCHEMA_CACHE.clear()
