"""Shared fixtures: a throwaway SQLite database and an in-memory Redis stand-in."""

from decimal import Decimal

import httpx
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app import models  # noqa: F401
from app.cache import ResponseCache
from app.config import Settings
from app.database import Database
from app.main import create_app
from app.models.menu_item import MenuItem
from app.models.restaurant import Restaurant


class InMemoryRedis:
    """Implements the handful of redis.asyncio calls the app makes."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.expiry: dict[str, int] = {}
        self.fail = False

    def _check(self):
        if self.fail:
            raise RedisConnectionError("redis is down")

    async def get(self, key):
        self._check()
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self._check()
        self.store[key] = value
        if ex is not None:
            self.expiry[key] = ex
        return True

    async def incr(self, key):
        self._check()
        value = int(self.store.get(key, 0)) + 1
        self.store[key] = str(value)
        return value

    async def expire(self, key, seconds):
        self._check()
        self.expiry[key] = seconds
        return True

    def pipeline(self, transaction=True):
        return InMemoryPipeline(self)

    async def ping(self):
        self._check()
        return True

    async def aclose(self):
        pass


class InMemoryPipeline:
    """Queues incr/expire calls and applies them together on execute()."""

    def __init__(self, redis):
        self.redis = redis
        self.commands = []

    def incr(self, key):
        self.commands.append((self.redis.incr, (key,)))
        return self

    def expire(self, key, seconds):
        self.commands.append((self.redis.expire, (key, seconds)))
        return self

    async def execute(self):
        self.redis._check()
        results = [await command(*args) for command, args in self.commands]
        self.commands = []
        return results


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def menu_item(database):
    """One restaurant with a single 15.99 menu item (id 1)."""
    async with database.session_factory() as db:
        restaurant = Restaurant(
            name="Test Restaurant",
            cuisine="Test Cuisine",
            rating=Decimal("4.5"),
            delivery_time=30,
            min_order=Decimal("15.00"),
            address="123 Test St, Test City",
            phone="+1-555-0101",
        )
        item = MenuItem(
            name="Test Dish",
            description="Test dish description",
            price=Decimal("15.99"),
            category="Main Course",
        )
        restaurant.menu_items = [item]
        db.add(restaurant)
        await db.commit()
        return item


@pytest.fixture
def redis():
    return InMemoryRedis()


@pytest.fixture
def settings():
    return Settings(
        rate_limit_max_requests=100,
        rate_limit_window_seconds=900,
        seed_sample_data=False,
    )


@pytest.fixture
def app(settings, database, redis):
    application = create_app(settings)
    application.state.database = database
    application.state.redis = redis
    application.state.cache = ResponseCache(redis, ttl=settings.cache_ttl)
    return application


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
