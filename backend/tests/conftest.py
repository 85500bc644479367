from datetime import datetime
from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport

from dealership.core.deps import get_db
from dealership.db.init_db import ensure_tables_exist
from dealership.db.session import create_engine_for, create_session_factory
from dealership.main import app
from dealership.models import CarUnit, Partner, Transaction

ACTOR = "tester"


@pytest.fixture
async def engine(tmp_path):
    engine = create_engine_for(f"sqlite:///{tmp_path / 'test.db'}")
    await ensure_tables_exist(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


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
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_car(db):
    counter = {"n": 0}

    async def _make(status="draft", sold_price=None, **fields):
        counter["n"] += 1
        values = dict(
            brand="Toyota",
            model="Avanza",
            year=2020,
            transmission="manual",
            odometer=45000,
            color="Silver",
            stock_code=f"STK-{counter['n']:03d}",
            status=status,
            sold_price=Decimal(str(sold_price)) if sold_price is not None else None,
        )
        values.update(fields)
        car = CarUnit(**values)
        db.add(car)
        await db.commit()
        await db.refresh(car)
        return car

    return _make


@pytest.fixture
def make_partner(db):
    async def _make(name="Budi Motor", type="broker", is_active=True):
        partner = Partner(name=name, type=type, is_active=is_active)
        db.add(partner)
        await db.commit()
        await db.refresh(partner)
        return partner

    return _make


@pytest.fixture
def add_txn(db):
    """Insert a ledger row directly, bypassing the reconciler"""
    async def _add(car_id, type, amount, partner_id=None, date=None):
        txn = Transaction(
            car_id=car_id,
            partner_id=partner_id,
            type=type,
            amount=Decimal(str(amount)),
            date=date or datetime.utcnow(),
        )
        db.add(txn)
        await db.commit()
        await db.refresh(txn)
        return txn

    return _add
