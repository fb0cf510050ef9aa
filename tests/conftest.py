from __future__ import annotations

import pytest

from repocast.models import RepositoryRef
from tests._fixtures.fakes import FakeClock


@pytest.fixture
def ref() -> RepositoryRef:
    """A repository reference shared by component tests."""
    return RepositoryRef(owner="acme", name="shortener", branch="main")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
