"""Shared fixtures for the catalog_pdf test suite."""

from __future__ import annotations

import typing as typ

import pytest

from .helpers import RecordingWriter, StubResolver, spring_menu

if typ.TYPE_CHECKING:
    from catalog_pdf.config import CatalogSnapshot


@pytest.fixture
def recording_writer() -> RecordingWriter:
    """Return an empty A4 writer that records drawing calls."""
    return RecordingWriter()


@pytest.fixture
def stub_resolver() -> StubResolver:
    """Return a resolver that fails every reference until assets are added."""
    return StubResolver()


@pytest.fixture
def spring_menu_snapshot() -> CatalogSnapshot:
    """Return the documented Spring Menu example catalog."""
    return spring_menu()
