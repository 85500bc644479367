from datetime import datetime, timedelta

from dealership.services.dashboard import get_dashboard_kpis
from dealership.services.reports import (
    get_profit_report, get_expense_report, get_stock_aging_report, aging_bucket
)


async def test_profit_report(db, make_car, add_txn):
    first = await make_car(status="sold", sold_price=25000)
    second = await make_car(status="sold", sold_price=12000)
    await make_car(status="listed")
    await add_txn(first.id, "acquisition", 20000)
    await add_txn(second.id, "acquisition", 11000)

    report = await get_profit_report(db)
    assert report.units_sold == 2
    assert report.total_profit == 6000.0
    assert report.average_profit_per_unit == 3000.0
    assert report.period_start is None


async def test_profit_report_period(db, make_car):
    now = datetime.utcnow()
    await make_car(status="sold", sold_price=10000, updated_at=now - timedelta(days=40))
    await make_car(status="sold", sold_price=10000, updated_at=now - timedelta(days=2))

    report = await get_profit_report(db, start_date=now - timedelta(days=7))
    assert report.units_sold == 1


async def test_expense_report_groups_by_type_and_partner(db, make_car, make_partner, add_txn):
    car = await make_car()
    workshop = await make_partner(name="Bengkel Jaya", type="workshop")
    await add_txn(car.id, "acquisition", 15000)
    await add_txn(car.id, "workshop", 700, partner_id=workshop.id)
    await add_txn(car.id, "workshop", 300, partner_id=workshop.id)
    await add_txn(car.id, "workshop", 100)
    await add_txn(car.id, "sale_income", 20000)

    report = await get_expense_report(db)
    groups = {(item.type, item.partner_name): item for item in report.data}

    assert set(groups) == {("acquisition", None), ("workshop", "Bengkel Jaya"), ("workshop", None)}
    assert groups[("workshop", "Bengkel Jaya")].total_amount == 1000.0
    assert groups[("workshop", "Bengkel Jaya")].transaction_count == 2
    assert report.total_amount == 16100.0

    by_partner = await get_expense_report(db, partner_id=workshop.id)
    assert len(by_partner.data) == 1


def test_aging_bucket_edges():
    assert aging_bucket(0) == "0-30 days"
    assert aging_bucket(30) == "0-30 days"
    assert aging_bucket(31) == "31-60 days"
    assert aging_bucket(90) == "61-90 days"
    assert aging_bucket(91) == "90+ days"


async def test_stock_aging(db, make_car, add_txn):
    now = datetime.utcnow()
    fresh = await make_car(created_at=now - timedelta(days=5))
    aged = await make_car(status="listed", created_at=now - timedelta(days=45))
    await make_car(status="ready", created_at=now - timedelta(days=200))
    await make_car(status="sold", created_at=now - timedelta(days=45))
    await add_txn(fresh.id, "acquisition", 10000)
    await add_txn(aged.id, "acquisition", 14000)

    report = await get_stock_aging_report(db, now=now)
    buckets = {b.age_range: b for b in report.data}

    assert list(buckets) == ["0-30 days", "31-60 days", "61-90 days", "90+ days"]
    assert buckets["0-30 days"].count == 1
    assert buckets["0-30 days"].total_value == 10000.0
    assert buckets["31-60 days"].count == 1
    assert buckets["31-60 days"].total_value == 14000.0
    assert buckets["61-90 days"].count == 0
    assert buckets["90+ days"].count == 1
    assert buckets["90+ days"].total_value == 0.0


async def test_dashboard_kpis(db, make_car, add_txn):
    now = datetime.utcnow()
    winner = await make_car(status="sold", sold_price=20000, created_at=now - timedelta(days=10), updated_at=now)
    modest = await make_car(status="sold", sold_price=11000, created_at=now - timedelta(days=20), updated_at=now)
    loser = await make_car(status="listed")
    await make_car(status="draft")
    await add_txn(winner.id, "acquisition", 18800)
    await add_txn(winner.id, "other_income", 500)
    await add_txn(modest.id, "acquisition", 10800)
    await add_txn(loser.id, "acquisition", 9000)

    kpis = await get_dashboard_kpis(db)
    assert kpis.active_stock_count == 2
    assert kpis.average_days_to_sale == 15.0
    assert kpis.total_period_profit == 1700.0 + 200.0 - 9000.0
    assert kpis.top_profit_unit.car_id == winner.id
    assert kpis.top_profit_unit.profit == 1700.0
    assert kpis.bottom_profit_unit.car_id == modest.id
    assert kpis.bottom_profit_unit.profit == 200.0


async def test_dashboard_empty(db):
    kpis = await get_dashboard_kpis(db)
    assert kpis.active_stock_count == 0
    assert kpis.average_days_to_sale is None
    assert kpis.total_period_profit == 0.0
    assert kpis.top_profit_unit is None
    assert kpis.bottom_profit_unit is None
