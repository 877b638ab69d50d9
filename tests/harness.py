"""Test harness for unit, integration and end-to-end tests.

Integration tests assume PostgreSQL is already running and reachable at
DATABASE__URL with migrations applied.
"""

from dataclasses import dataclass

import pytest
import pytest_asyncio
from dishka import AsyncContainer
from fastapi.testclient import TestClient

from engage.interface.api.app import create_app
from engage.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking
    - Yields a request-scoped container for service access
    - Closes both when the test ends

    Args:
        unmock: Components to use real implementations for

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - everything mocked, no services needed
        unit_env = create_env_fixture()

        # Integration tests - real persistence, assumes postgres running
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_cast_vote(unit_env):
            vote_service = await unit_env.get(VoteService)
            ...
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(unmock=unmock or set())

        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment


@dataclass
class ApiEnvironment:
    """A running test app and the container behind it."""

    client: TestClient
    container: AsyncContainer

    def seed(self, seeder, *args, **kwargs):
        """Run an async seeder in a fresh request scope on the app's event loop."""

        async def _run():
            async with self.container() as env:
                return await seeder(env, *args, **kwargs)

        return self.client.portal.call(_run)

    def get(self, dependency):
        """Resolve an APP-scoped dependency from the container."""

        async def _get():
            return await self.container.get(dependency)

        return self.client.portal.call(_get)


def create_api_fixture(unmock: set[Component] | None = None):
    """Factory for end-to-end fixtures serving the app from a test container.

    The TestClient runs the app lifespan, which closes the container on exit.

    Usage:
        api = create_api_fixture()

        def test_health(api):
            assert api.client.get("/health").status_code == 200
    """

    @pytest.fixture
    def _api_environment():
        container = build_test_container(unmock=unmock or set())
        with TestClient(create_app(container)) as client:
            yield ApiEnvironment(client=client, container=container)

    return _api_environment
