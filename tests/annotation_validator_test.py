"""Tests for constrained-value checks on parsed annotations."""

from __future__ import annotations

from typing import Optional

import pytest
from lsprotocol import types as lsp

from acp_lsp.annotations import Annotation, AnnotationCategory, validate_annotation


def make_annotation(namespace: str, value: Optional[str]) -> Annotation:
    return Annotation(
        raw=f"@acp:{namespace} {value or ''}".rstrip(),
        namespace=namespace,
        category=AnnotationCategory.CONSTRAINT,
        range=lsp.Range(start=lsp.Position(line=0, character=0), end=lsp.Position(line=0, character=10)),
        offset=0,
        value=value,
    )


@pytest.mark.parametrize(
    ("namespace", "value", "code"),
    [
        ("lock", "sealed", "invalid-lock-level"),
        ("layer", "frontend", "invalid-layer"),
        ("stability", "beta", "invalid-stability"),
    ],
)
def test_invalid_constrained_value(namespace: str, value: str, code: str) -> None:
    diagnostics = validate_annotation(make_annotation(namespace, value))
    assert len(diagnostics) == 1
    assert diagnostics[0].code == code
    assert diagnostics[0].severity == lsp.DiagnosticSeverity.Error
    assert f"'{value}'" in diagnostics[0].message


def test_message_lists_legal_values() -> None:
    message = validate_annotation(make_annotation("lock", "sealed"))[0].message
    assert message == (
        "Invalid lock level 'sealed'. Valid levels: frozen, restricted, approval-required, "
        "tests-required, docs-required, review-required, normal, experimental"
    )


@pytest.mark.parametrize(
    ("namespace", "value"),
    [
        ("lock", "frozen"),
        ("layer", "repository"),
        ("stability", "deprecated"),
        ("lock", None),
        ("purpose", "anything goes"),
    ],
)
def test_accepted(namespace: str, value: Optional[str]) -> None:
    assert validate_annotation(make_annotation(namespace, value)) == []


def test_annotation_is_not_modified() -> None:
    annotation = make_annotation("lock", "sealed")
    validate_annotation(annotation)
    assert annotation.diagnostics == []
