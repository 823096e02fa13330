from typing import AsyncGenerator, Callable, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from productlobby.core.database.entities import User


@pytest.fixture
def auth() -> Callable[[User], Dict[str, str]]:
    """Build headers identifying a user as the caller."""

    def _headers(user: User) -> Dict[str, str]:
        return {"X-User-Id": user.id}

    return _headers


@pytest_asyncio.fixture(name="client")
async def client_fixture(db_engine, cache) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client over the application.

    The ASGI transport does not run the lifespan, so the tables come from the
    ``db_engine`` fixture. Background tasks finish before each response is
    returned to the test.
    """
    from productlobby.server.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client
    app.dependency_overrides.clear()
