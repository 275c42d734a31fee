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

"""Value checks for constrained annotation namespaces."""

from typing import Dict, List

from lsprotocol import types as lsp

from .catalog import is_valid_value, legal_values
from .types import DIAGNOSTIC_SOURCE, Annotation, AnnotationDiagnosticCode


_CHECKS: Dict[str, tuple] = {
    'lock': (AnnotationDiagnosticCode.INVALID_LOCK_LEVEL, 'lock level', 'Valid levels'),
    'layer': (AnnotationDiagnosticCode.INVALID_LAYER, 'layer', 'Valid layers'),
    'stability': (AnnotationDiagnosticCode.INVALID_STABILITY, 'stability', 'Valid values'),
}


def validate_annotation(annotation: Annotation) -> List[lsp.Diagnostic]:
    """Validate a parsed annotation and return diagnostics.

    Only ``lock``, ``layer`` and ``stability`` values are checked, and only
    when a value is present. The annotation is not modified.
    """
    check = _CHECKS.get(annotation.namespace)
    if check is None or annotation.value is None:
        return []

    if is_valid_value(annotation.namespace, annotation.value):
        return []

    code, label, listing = check
    return [lsp.Diagnostic(
        range=annotation.range,
        message=(
            f"Invalid {label} '{annotation.value}'. "
            f"{listing}: {', '.join(legal_values(annotation.namespace))}"
        ),
        severity=lsp.DiagnosticSeverity.Error,
        code=code,
        source=DIAGNOSTIC_SOURCE,
    )]
