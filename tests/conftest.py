"""Shared fixtures and helpers for tests."""

from __future__ import annotations

from typing import Callable, List, Tuple

import pytest

from acp_lsp.annotations import AnnotationParser
from acp_lsp.documents import DocumentSnapshot
from acp_lsp.schema import SchemaRegistry, SchemaValidator


class FakeHandle:
    def __init__(self, loop: "FakeLoop", delay: float, callback: Callable[[], None]) -> None:
        self.loop = loop
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeLoop:
    """Stands in for ``loop.call_later``; timers only fire when told to."""

    def __init__(self) -> None:
        self.handles: List[FakeHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle(self, delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def live(self) -> List[FakeHandle]:
        return [h for h in self.handles if not h.cancelled]

    def fire_all(self) -> None:
        for handle in self.live:
            handle.cancelled = True
            handle.callback()


class RecordingSink:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, list]] = []

    def __call__(self, uri: str, diagnostics: list) -> None:
        self.calls.append((uri, list(diagnostics)))

    def last(self, uri: str) -> list:
        for called_uri, diagnostics in reversed(self.calls):
            if called_uri == uri:
                return diagnostics
        raise AssertionError(f"nothing published for {uri}")


def snapshot(uri: str, text: str, version: int = 1, language_id: str | None = None) -> DocumentSnapshot:
    return DocumentSnapshot(uri=uri, text=text, version=version, language_id=language_id)


@pytest.fixture
def fake_loop() -> FakeLoop:
    return FakeLoop()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def parser() -> AnnotationParser:
    return AnnotationParser()


@pytest.fixture(scope="session")
def registry() -> SchemaRegistry:
    return SchemaRegistry()


@pytest.fixture
def schema_validator(registry: SchemaRegistry) -> SchemaValidator:
    return SchemaValidator(registry)
