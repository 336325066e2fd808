import httpx
import pytest
import pytest_asyncio

from triagem.core.config import get_settings


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    # Tests mutate env vars; never leak a cached Settings instance across tests.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def client():
    """In-process ASGI client (no uvicorn needed)."""
    from triagem.main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
