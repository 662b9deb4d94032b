import os

# Settings are read at import time; keep tests off Postgres and away from trained models
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("MODEL_PATH", "tests/no_models")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.api.deps import get_db, get_session_factory
from app.core.database import Base
from app.core.security import create_access_token
from app.main import app
from app.models import Account, Budget, Category, Transaction, User


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _save(db, obj):
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    return obj


@pytest.fixture
def save(db):
    async def _inner(obj):
        return await _save(db, obj)
    return _inner


@pytest.fixture
async def user(db):
    return await _save(db, User(username="alice", email="alice@example.com"))


@pytest.fixture
async def other_user(db):
    return await _save(db, User(username="bob", email="bob@example.com"))


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def admin_headers(other_user):
    return {"Authorization": f"Bearer {create_access_token(other_user.id, role='admin')}"}


@pytest.fixture
async def account(db, user):
    return await _save(db, Account(
        user_id=user.id,
        account_name="Cash",
        account_type="cash",
        current_balance=Decimal("1000000")
    ))


@pytest.fixture
async def food_category(db):
    return await _save(db, Category(
        user_id=None,
        category_name="Food & Drinks",
        transaction_type="expense",
        is_default=True
    ))


@pytest.fixture
async def salary_category(db):
    return await _save(db, Category(
        user_id=None,
        category_name="Salary",
        transaction_type="income",
        is_default=True
    ))


@pytest.fixture
async def food_budget(db, user, food_category):
    """1,000,000 budget around today with the default 90% threshold"""
    today = date.today()
    return await _save(db, Budget(
        user_id=user.id,
        category_id=food_category.id,
        amount=Decimal("1000000"),
        start_date=today - timedelta(days=10),
        end_date=today + timedelta(days=10),
        notification_threshold=Decimal("90")
    ))


@pytest.fixture
def add_expense(db, user, account):
    async def _inner(amount, category_id=None, when=None, description="expense"):
        return await _save(db, Transaction(
            user_id=user.id,
            account_id=account.id,
            category_id=category_id,
            amount=Decimal(str(amount)),
            transaction_type="expense",
            description=description,
            transaction_date=when or datetime.utcnow()
        ))
    return _inner
