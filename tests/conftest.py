import asyncio
import os
import tempfile

# Settings are read at import time, so point them at a throwaway database first
_DB_DIR = tempfile.mkdtemp(prefix="foodfantasy-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
for _name in ("VAPID_PUBLIC_KEY", "VAPID_PRIVATE_KEY", "PHONEPE_MERCHANT_ID", "PHONEPE_SALT_KEY", "SUPER_ADMIN_EMAIL", "REDIS_URL"):
    os.environ.pop(_name, None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

import foodfantasy.models  # noqa: E402,F401
from foodfantasy.crud import admin as admin_crud  # noqa: E402
from foodfantasy.db import get_db  # noqa: E402
from foodfantasy.main import app  # noqa: E402
from foodfantasy.models.base import Base  # noqa: E402

# Every TestClient request runs on its own event loop; pooled connections can't cross loops
engine = create_async_engine(os.environ["DATABASE_URL"], poolclass=NullPool)
TestSession = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

SUPER_ADMIN = "owner@example.com"
ADMIN = "cashier@example.com"


async def override_get_db():
    async with TestSession() as session:
        yield session


def run_db(fn):
    """Run `fn(session)` to completion against the test database."""
    async def _run():
        async with TestSession() as session:
            return await fn(session)
    return asyncio.run(_run())


async def _reset_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture(autouse=True)
def fresh_db():
    asyncio.run(_reset_schema())
    yield


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = override_get_db
    # 500 responses are asserted on, not re-raised
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def admins():
    async def seed(session):
        await admin_crud.create_admin(session, SUPER_ADMIN, is_super_admin=True)
        await admin_crud.create_admin(session, ADMIN, created_by=SUPER_ADMIN)
    run_db(seed)
    return {"super": {"X-User-Email": SUPER_ADMIN}, "admin": {"X-User-Email": ADMIN}}


def order_body(**overrides):
    body = {
        "userEmail": "guest@example.com",
        "userName": "Asha",
        "foodName": "Paneer Tikka",
        "category": "Starters",
        "type": "Veg",
        "quantity": 2,
        "price": 180,
        "tableNumber": 5,
        "isInRestaurant": True,
        "chairIndices": [0, 1],
    }
    body.update(overrides)
    return body
