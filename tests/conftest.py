"""Shared fixtures for switchyard tests."""

import pytest

from sample_controllers import ServiceContainer


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def container() -> ServiceContainer:
    return ServiceContainer()
