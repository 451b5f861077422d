"""Shared test fixtures for Property Retriever."""

from __future__ import annotations

from collections.abc import Callable, Mapping

import pytest

from property_retriever import LocalEnvironment, PropertyRetriever, reset_registry
from property_retriever.settings import RetrieverSettings

PROGRAM = "program.exe"


@pytest.fixture
def make_retriever() -> Callable[..., PropertyRetriever]:
    """Return a factory building retrievers over fixed arguments and env.

    The program path is prepended to argv, so tests only list the tokens
    after it.
    """

    def _make(
        *args: str,
        env: Mapping[str, str] | None = None,
        settings: RetrieverSettings | None = None,
    ) -> PropertyRetriever:
        environment = LocalEnvironment(argv=[PROGRAM, *args], env=env or {})
        return PropertyRetriever(environment, settings)

    return _make


@pytest.fixture
def clean_registry():
    """Reset the process-wide singletons around a test."""
    reset_registry()
    yield
    reset_registry()
