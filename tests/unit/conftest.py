"""Unit-test fixtures shared across pubstatus tests."""

from __future__ import annotations

import os

import pytest

from tests.helpers.fake_github import FakeGitHub

_PUBSTATUS_PREFIX = "PUBSTATUS_"


@pytest.fixture(autouse=True)
def _clean_pubstatus_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove ambient ``PUBSTATUS_*`` settings so each test starts clean."""
    for key in list(os.environ):
        if key.startswith(_PUBSTATUS_PREFIX):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def github() -> FakeGitHub:
    """Provide a fake GitHub API that accepts every request."""
    return FakeGitHub()
