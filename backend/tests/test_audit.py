from dealership.schemas.audit_log import AuditLogCreate
from dealership.services.audit import record_audit, list_audit_logs, create_audit_log


async def test_history_is_chronological_and_filtered(db):
    record_audit(db, "alice", "car_unit", 1, "create", None, {"stock_code": "A"})
    record_audit(db, "alice", "car_unit", 1, "status_change", {"status": "draft"}, {"status": "bought"})
    record_audit(db, "bob", "partner", 0, "update", {"name": "x"}, {"name": "y"})
    await db.commit()

    logs = await list_audit_logs(db)
    assert [log.action for log in logs] == ["create", "status_change", "update"]

    logs = await list_audit_logs(db, entity_type="car_unit", action="status_change")
    assert len(logs) == 1
    assert logs[0].action_display == "Status changed"

    logs = await list_audit_logs(db, entity_id=0)
    assert [log.actor for log in logs] == ["bob"]


async def test_manual_entry_committed(db, session_factory):
    log = await create_audit_log(
        db,
        AuditLogCreate(actor="ops", entity_type="car_unit", entity_id=7, action="update", after_data={"note": "fixed"}),
    )
    assert log.id is not None

    async with session_factory() as other:
        logs = await list_audit_logs(other, entity_id=7)
        assert len(logs) == 1
        assert logs[0].after_data == {"note": "fixed"}
