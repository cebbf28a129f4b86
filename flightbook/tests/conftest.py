"""
Shared fixtures: a throwaway SQLite database, an in-memory Redis stand-in
and an httpx client bound to the ASGI app.
"""
import os
import tempfile


_tmp_dir = tempfile.mkdtemp(prefix="flightbook-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_dir}/test.db"
os.environ["FLIGHT_SEARCH_DELAY_MS"] = "0"
os.environ["PAYMENTS_DRY_RUN"] = "true"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "rzp_test_secret"
os.environ["EMAIL_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-jwt-secret"

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from flightbook.database import async_session_factory, close_db, drop_db, init_db  # noqa: E402
from flightbook.redis_service import RedisService, get_redis  # noqa: E402
from flightbook.server import app  # noqa: E402
from flightbook.tests.helpers import InMemoryRedis  # noqa: E402


@pytest.fixture
def fake_redis():
    return InMemoryRedis()


@pytest.fixture
def redis(fake_redis):
    return RedisService(redis_client=fake_redis)


@pytest_asyncio.fixture
async def database():
    await drop_db()
    await init_db()
    yield
    await close_db()


@pytest_asyncio.fixture
async def db_session(database):
    async with async_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(database, redis):
    async def override_redis():
        return redis

    app.dependency_overrides[get_redis] = override_redis
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()
