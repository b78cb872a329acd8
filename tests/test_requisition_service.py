from datetime import datetime

import pytest

from core.enums import RequisitionStatus
from core.exceptions import NotFoundError
from schemas.requisition import RequisitionCreate
from services.requisition_service import RequisitionService


class FixedClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 5, 20, 9, 30, 0))


@pytest.fixture
def service(data_service, clock):
    return RequisitionService(data_service, clock=clock)


def test_same_day_numbering(service):
    """同一天连续领料: -001, -002, -003"""
    numbers = [service.create_requisition(RequisitionCreate(material="A"))["req_number"] for _ in range(3)]
    assert numbers == ["LL-20240520-001", "LL-20240520-002", "LL-20240520-003"]


def test_numbering_restarts_next_day(service, clock):
    service.create_requisition(RequisitionCreate(material="A"))
    service.create_requisition(RequisitionCreate(material="A"))
    clock.now = datetime(2024, 5, 21, 8, 0, 0)
    assert service.create_requisition(RequisitionCreate(material="A"))["req_number"] == "LL-20240521-001"


def test_create_defaults(service):
    req = service.create_requisition(RequisitionCreate.model_validate({
        "order_id": "", "material": "ABS 750", "requested_weight_kg": "25.5", "applicant": "李四"}))

    assert req["date"] == "2024-05-20"
    assert req["order_id"] is None
    assert req["requested_weight_kg"] == 25.5
    assert req["status"] == RequisitionStatus.PENDING_ISSUE.value
    assert req["issued_at"] is None
    assert req["created_at"] == "2024-05-20 09:30:00"


def test_create_keeps_given_date_and_order(service):
    req = service.create_requisition(RequisitionCreate.model_validate(
        {"date": "2024-05-18", "order_id": "7", "requested_weight_kg": "abc"}))
    assert req["date"] == "2024-05-18"
    assert req["order_id"] == 7
    assert req["requested_weight_kg"] == 0.0
    # 编号按当天生成
    assert req["req_number"] == "LL-20240520-001"


def test_list_filter_and_order(service):
    service.create_requisition(RequisitionCreate(order_id=1))
    service.create_requisition(RequisitionCreate(order_id=2))
    service.create_requisition(RequisitionCreate(order_id=1))

    assert [r["id"] for r in service.list_requisitions()] == [3, 2, 1]
    assert [r["id"] for r in service.list_requisitions(order_id=1)] == [3, 1]


def test_issue_stamps_time(service, clock):
    req = service.create_requisition(RequisitionCreate(material="A"))
    clock.now = datetime(2024, 5, 20, 15, 0, 0)

    issued = service.update_status(req["id"], RequisitionStatus.ISSUED.value)
    assert issued["status"] == RequisitionStatus.ISSUED.value
    assert issued["issued_at"] == "2024-05-20 15:00:00"


def test_other_status_does_not_stamp(service):
    req = service.create_requisition(RequisitionCreate(material="A"))
    updated = service.update_status(req["id"], "已取消")
    assert updated["status"] == "已取消"
    assert updated["issued_at"] is None


def test_update_missing(service):
    with pytest.raises(NotFoundError):
        service.update_status(100, RequisitionStatus.ISSUED.value)


def test_delete(service):
    a = service.create_requisition(RequisitionCreate(material="A"))
    b = service.create_requisition(RequisitionCreate(material="B"))
    service.delete_requisition(a["id"])
    assert [r["id"] for r in service.list_requisitions()] == [b["id"]]
