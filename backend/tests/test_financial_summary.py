from decimal import Decimal

import pytest

from dealership.core.exceptions import NotFound
from dealership.services.financial_summary import (
    get_financial_summary, get_all_financial_summaries
)


async def test_stored_sold_price_counts_as_revenue(db, make_car, add_txn):
    car = await make_car(status="sold", sold_price=25000)
    await add_txn(car.id, "acquisition", 20000)
    await add_txn(car.id, "workshop", 1500)
    await add_txn(car.id, "detailing", 500)

    summary = await get_financial_summary(db, car.id)
    assert summary.total_acquisition == Decimal("20000")
    assert summary.total_expenses == Decimal("2000")
    assert summary.total_incomes == Decimal("0")
    assert summary.profit == Decimal("3000")
    assert summary.sold_price == Decimal("25000")


async def test_profit_from_ledger_incomes(db, make_car, add_txn):
    car = await make_car(status="sold", sold_price=30000)
    await add_txn(car.id, "acquisition", 22000)
    await add_txn(car.id, "broker_fee", 1500)
    await add_txn(car.id, "tax", 250.50)
    await add_txn(car.id, "sale_income", 30000)
    await add_txn(car.id, "other_income", 400)

    summary = await get_financial_summary(db, car.id)
    assert summary.total_incomes == Decimal("30400")
    assert summary.total_expenses == Decimal("1750.50")
    assert summary.profit == summary.total_incomes - summary.total_acquisition - summary.total_expenses
    assert summary.profit == Decimal("6649.50")


async def test_stored_price_with_other_income(db, make_car, add_txn):
    car = await make_car(status="sold", sold_price=20000)
    await add_txn(car.id, "acquisition", 18800)
    await add_txn(car.id, "other_income", 500)

    summary = await get_financial_summary(db, car.id)
    assert summary.total_incomes == Decimal("500")
    assert summary.profit == Decimal("1700")


async def test_sold_price_falls_back_to_sale_income_sum(db, make_car, add_txn):
    car = await make_car(status="listed")
    await add_txn(car.id, "sale_income", 10000)
    await add_txn(car.id, "sale_income", 2500)

    summary = await get_financial_summary(db, car.id)
    assert summary.sold_price == Decimal("12500")


async def test_empty_ledger(db, make_car):
    car = await make_car()
    summary = await get_financial_summary(db, car.id)
    assert summary.profit == Decimal("0")
    assert summary.sold_price is None
    assert summary.total_cost == Decimal("0")


async def test_summary_is_read_only(db, make_car, add_txn):
    car = await make_car(status="listed")
    await add_txn(car.id, "sale_income", 9000)

    await get_financial_summary(db, car.id)
    await db.refresh(car)
    assert car.sold_price is None


async def test_missing_car(db):
    with pytest.raises(NotFound, match="Car unit with ID 3 not found"):
        await get_financial_summary(db, 3)


async def test_all_summaries(db, make_car, add_txn):
    first = await make_car()
    second = await make_car(status="sold", sold_price=15000)
    await add_txn(first.id, "acquisition", 9000)
    await add_txn(second.id, "acquisition", 11000)

    summaries = await get_all_financial_summaries(db)
    assert [s.car_id for s in summaries] == [first.id, second.id]
    assert summaries[0].profit == Decimal("-9000")
    assert summaries[1].profit == Decimal("4000")


async def test_all_summaries_skips_failing_car(db, make_car, monkeypatch):
    good = await make_car()
    bad = await make_car()

    from dealership.services import financial_summary

    original = financial_summary.summarize

    def flaky(car, transactions):
        if car.id == bad.id:
            raise RuntimeError("boom")
        return original(car, transactions)

    monkeypatch.setattr(financial_summary, "summarize", flaky)

    summaries = await get_all_financial_summaries(db)
    assert [s.car_id for s in summaries] == [good.id]
