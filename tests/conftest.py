import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"

from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rental_api.core.availability_service import vehicle_locks
from rental_api.core.database import Base, create_engine_for
from rental_api.core.deps import get_db
from rental_api.core.security import create_access_token, get_password_hash
from rental_api.main import app
from rental_api.models.enums import OrderStatus, Role
from rental_api.models.order import Order
from rental_api.models.user import User
from rental_api.models.vehicle import Vehicle

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def reset_vehicle_locks():
    vehicle_locks.clear()
    yield
    vehicle_locks.clear()


@pytest.fixture
async def session_maker(tmp_path):
    """
    Fresh SQLite file per test. A file (not :memory:) so that concurrent
    sessions see each other's commits.
    """
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'rental.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()


@pytest.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_maker):
    counter = {"n": 0}

    async def _make_user(role: Role = Role.customer, email: str = None, is_active: bool = True) -> User:
        counter["n"] += 1
        async with session_maker() as session:
            user = User(
                name=f"User {counter['n']}",
                email=email or f"user{counter['n']}@example.com",
                password_hash=get_password_hash(DEFAULT_PASSWORD),
                role=role.value,
                is_verified_by_admin=role != Role.customer,
                is_active=is_active,
            )
            session.add(user)
            await session.commit()
            return user

    return _make_user


@pytest.fixture
def make_vehicle(session_maker):
    counter = {"n": 0}

    async def _make_vehicle(owner: User, daily_rate: float = 350000, is_available: bool = True, **overrides) -> Vehicle:
        counter["n"] += 1
        fields = dict(
            owner_id=owner.id,
            name=f"Toyota Avanza {counter['n']}",
            slug=f"toyota-avanza-{counter['n']}",
            type="MPV",
            capacity=7,
            transmission_type="MANUAL",
            fuel_type="GASOLINE",
            daily_rate=daily_rate,
            is_available=is_available,
            license_plate=f"B {1000 + counter['n']} XYZ",
            city="Jakarta",
        )
        fields.update(overrides)
        async with session_maker() as session:
            vehicle = Vehicle(**fields)
            session.add(vehicle)
            await session.commit()
            return vehicle

    return _make_vehicle


@pytest.fixture
def make_order(session_maker):
    """Insert an order directly, bypassing the conflict check."""

    async def _make_order(
        user: User,
        vehicle: Vehicle,
        start: date,
        end: date,
        status: OrderStatus = OrderStatus.approved,
    ) -> Order:
        days = (end - start).days
        total = days * vehicle.daily_rate
        async with session_maker() as session:
            order = Order(
                user_id=user.id,
                vehicle_id=vehicle.id,
                start_date=start,
                end_date=end,
                rental_days=days,
                total_price=total,
                deposit_amount=0.0,
                remaining_amount=total,
                payment_method="CASH",
                order_status=status.value,
            )
            session.add(order)
            await session.commit()
            return order

    return _make_order


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        token = create_access_token({"sub": user.id, "role": user.role})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
async def admin(make_user):
    return await make_user(Role.admin, email="admin@example.com")


@pytest.fixture
async def customer(make_user):
    return await make_user(Role.customer, email="renter@example.com")
