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

"""Start-up compilation of validators for the ACP JSON artifacts."""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from jsonschema.exceptions import SchemaError
from jsonschema.protocols import Validator
from jsonschema.validators import Draft202012Validator, validator_for
from referencing import Registry, Resource
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT202012

from ..exceptions import SchemaCompilationError
from .loader import load_schema

logger = logging.getLogger(__name__)


class SchemaType(str, Enum):
    CONFIG = 'config'
    CACHE = 'cache'
    VARS = 'vars'
    ATTEMPTS = 'attempts'
    SYNC = 'sync'
    PRIMER = 'primer'


class SchemaRegistry:
    """Holds one compiled validator per schema type.

    Validators are built once in the constructor and never changed
    afterwards. A type whose schema fails to load or compile is logged and
    stays unavailable for the lifetime of the registry.
    """

    def __init__(
        self,
        schemas: Optional[Mapping[SchemaType, Any]] = None,
        loader: Callable[[str], dict] = load_schema,
    ):
        """Load and compile all schema types.

        Args:
            schemas: Schema documents to use instead of the bundled files,
                keyed by type; types not present are loaded with ``loader``
            loader: Function loading a schema document by type name
        """
        self._schemas: Dict[SchemaType, dict] = {}
        self._validators: Dict[SchemaType, Validator] = {}
        self._failures: Dict[SchemaType, str] = {}

        for schema_type in SchemaType:
            try:
                if schemas is not None and schema_type in schemas:
                    schema = schemas[schema_type]
                else:
                    schema = loader(schema_type.value)
                if not isinstance(schema, dict):
                    raise SchemaCompilationError("schema document must be a JSON object")
                self._schemas[schema_type] = schema
                logger.debug(f"Loaded schema: {schema_type.value}")
            except Exception as e:
                self._mark_failed(schema_type, str(e))

        # Register every schema first so cross-schema $refs resolve
        self._registry = Registry().with_resources(self._resources())

        for schema_type, schema in self._schemas.items():
            try:
                self._validators[schema_type] = self._compile(schema)
                logger.debug(f"Compiled schema: {schema_type.value}")
            except Exception as e:
                self._mark_failed(schema_type, str(e))

    def get_validator(self, schema_type: SchemaType) -> Optional[Validator]:
        """Get the compiled validator, or None if the type failed to compile."""
        return self._validators.get(schema_type)

    def get_schema(self, schema_type: SchemaType) -> Optional[dict]:
        """Get the schema document for a type."""
        return self._schemas.get(schema_type)

    def is_available(self, schema_type: SchemaType) -> bool:
        return schema_type in self._validators

    @property
    def available_types(self) -> List[SchemaType]:
        return [schema_type for schema_type in SchemaType if schema_type in self._validators]

    @property
    def failures(self) -> Dict[SchemaType, str]:
        """Failure reasons of the types that could not be compiled."""
        return dict(self._failures)

    def _mark_failed(self, schema_type: SchemaType, reason: str):
        self._failures[schema_type] = reason
        logger.error(f"Failed to compile schema {schema_type.value}: {reason}")

    def _resources(self) -> List[Tuple[str, Resource]]:
        resources = []
        for schema_type, schema in list(self._schemas.items()):
            schema_id = schema.get('$id')
            if not isinstance(schema_id, str) or not schema_id:
                continue
            try:
                resources.append((schema_id, _as_resource(schema)))
            except Exception as e:
                del self._schemas[schema_type]
                self._mark_failed(schema_type, f"Cannot register schema: {e}")
        return resources

    def _compile(self, schema: dict) -> Validator:
        validator_cls = validator_for(schema, default=Draft202012Validator)
        try:
            validator_cls.check_schema(schema)
        except SchemaError as e:
            raise SchemaCompilationError(f"Invalid schema: {e.message}") from e

        # jsonschema resolves $refs lazily, so resolve them all now
        resolver = self._registry.resolver_with_root(_as_resource(schema))
        for ref in _iter_refs(schema):
            try:
                resolver.lookup(ref)
            except Unresolvable as e:
                raise SchemaCompilationError(f"Unresolvable reference '{ref}': {e}") from e

        return validator_cls(
            schema,
            registry=self._registry,
            format_checker=validator_cls.FORMAT_CHECKER,
        )


def _as_resource(schema: dict) -> Resource:
    return Resource.from_contents(schema, default_specification=DRAFT202012)


def _iter_refs(node: Any) -> Iterator[str]:
    if isinstance(node, dict):
        for key, value in node.items():
            if key == '$ref' and isinstance(value, str):
                yield value
            else:
                yield from _iter_refs(value)
    elif isinstance(node, list):
        for item in node:
            yield from _iter_refs(item)
