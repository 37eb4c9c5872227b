"""
Shared fixtures.

The application module builds its engine from settings at import time,
so the environment is pinned before anything from ``uaifood`` is
imported. Every test gets a fresh SQLite file; the app's ``get_db`` and
token blacklist are overridden to point at it.
"""

import os

os.environ["ENV_MODE"] = "development"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"

from decimal import Decimal

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import uaifood.models  # noqa: F401
from uaifood.core.security import create_access_token, hash_password
from uaifood.database import Base, get_db
from uaifood.main import app
from uaifood.models import Category, Item, User, UserRole
from uaifood.services.revocation import MemoryTokenBlacklist, get_token_blacklist

DEFAULT_PASSWORD = "senha123"


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def blacklist():
    return MemoryTokenBlacklist()


@pytest.fixture
async def client(session_maker, blacklist):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_blacklist] = lambda: blacklist

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# =============================================================================
# USERS
# =============================================================================

def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def make_user(session):
    counter = {"n": 0}

    async def factory(role: UserRole = UserRole.CLIENT, name: str = "Ana Souza") -> User:
        counter["n"] += 1
        user = User(
            name=name,
            phone="34 98888-1111",
            email=f"user{counter['n']}@teste.com",
            password=hash_password(DEFAULT_PASSWORD),
            role=role,
        )
        session.add(user)
        await session.commit()
        return user

    return factory


@pytest.fixture
async def admin(make_user):
    return await make_user(UserRole.ADMIN, name="Administrador")


@pytest.fixture
async def customer(make_user):
    return await make_user(UserRole.CLIENT, name="Ana Souza")


@pytest.fixture
async def other_customer(make_user):
    return await make_user(UserRole.CLIENT, name="Bruno Lima")


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def customer_headers(customer):
    return bearer(customer)


@pytest.fixture
def other_customer_headers(other_customer):
    return bearer(other_customer)


# =============================================================================
# CATALOG
# =============================================================================

@pytest.fixture
async def menu(session):
    """Two categories with a burger at 18.90 and a soda at 6.50."""
    snacks = Category(description="Lanches")
    drinks = Category(description="Bebidas")
    session.add_all([snacks, drinks])
    await session.flush()

    burger = Item(description="X-Salada", unit_price=Decimal("18.90"), category_id=snacks.id)
    soda = Item(description="Coca-Cola", unit_price=Decimal("6.50"), category_id=drinks.id)
    session.add_all([burger, soda])
    await session.commit()

    return {"snacks": snacks, "drinks": drinks, "burger": burger, "soda": soda}
