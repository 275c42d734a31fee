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

"""Namespace catalog for ACP annotations.

The tables here are built once at import time and never mutated.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


MARKER = '@acp:'


class AnnotationCategory(str, Enum):
    FILE_LEVEL = 'file-level'
    SYMBOL_LEVEL = 'symbol-level'
    CONSTRAINT = 'constraint'
    INLINE = 'inline'


FILE_LEVEL_NAMESPACES = ('purpose', 'module', 'domain', 'owner', 'layer', 'stability', 'ref')
SYMBOL_LEVEL_NAMESPACES = ('fn', 'class', 'method', 'param', 'returns', 'throws', 'example', 'deprecated')
CONSTRAINT_NAMESPACES = ('lock', 'lock-reason', 'style', 'behavior', 'quality', 'test')
INLINE_NAMESPACES = ('critical', 'todo', 'fixme', 'perf', 'hack', 'debug')

LOCK_LEVELS: Tuple[str, ...] = (
    'frozen',
    'restricted',
    'approval-required',
    'tests-required',
    'docs-required',
    'review-required',
    'normal',
    'experimental',
)

LAYERS: Tuple[str, ...] = (
    'handler',
    'controller',
    'service',
    'repository',
    'model',
    'util',
    'config',
    'middleware',
    'validator',
    'mapper',
)

STABILITY_LEVELS: Tuple[str, ...] = ('stable', 'experimental', 'deprecated')


def _build_categories() -> Mapping[str, AnnotationCategory]:
    table = {}
    for category, namespaces in (
        (AnnotationCategory.FILE_LEVEL, FILE_LEVEL_NAMESPACES),
        (AnnotationCategory.SYMBOL_LEVEL, SYMBOL_LEVEL_NAMESPACES),
        (AnnotationCategory.CONSTRAINT, CONSTRAINT_NAMESPACES),
        (AnnotationCategory.INLINE, INLINE_NAMESPACES),
    ):
        for namespace in namespaces:
            table[namespace] = category
    return MappingProxyType(table)


NAMESPACE_CATEGORIES: Mapping[str, AnnotationCategory] = _build_categories()

# Namespaces whose value must come from a fixed set
CONSTRAINED_VALUES: Mapping[str, frozenset] = MappingProxyType({
    'lock': frozenset(LOCK_LEVELS),
    'layer': frozenset(LAYERS),
    'stability': frozenset(STABILITY_LEVELS),
})

# Ordered for messages, CONSTRAINED_VALUES is for lookup
CONSTRAINED_VALUE_ORDER: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    'lock': LOCK_LEVELS,
    'layer': LAYERS,
    'stability': STABILITY_LEVELS,
})


def is_known_namespace(namespace: str) -> bool:
    return namespace in NAMESPACE_CATEGORIES


def get_category(namespace: str) -> Optional[AnnotationCategory]:
    """Get the category of a namespace, or None if it is not in the catalog."""
    return NAMESPACE_CATEGORIES.get(namespace)


def legal_values(namespace: str) -> Optional[Tuple[str, ...]]:
    """Get the legal values of a constrained namespace in declaration order."""
    return CONSTRAINED_VALUE_ORDER.get(namespace)


def is_valid_value(namespace: str, value: str) -> bool:
    """Check a value against a constrained namespace; unconstrained namespaces accept anything."""
    allowed = CONSTRAINED_VALUES.get(namespace)
    return allowed is None or value in allowed
