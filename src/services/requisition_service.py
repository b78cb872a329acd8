import logging
from datetime import datetime
from typing import Callable, List, Dict, Any, Optional

from core.enums import DataCategory, RequisitionStatus
from core.constants import (
    DATE_FORMAT, DATETIME_FORMAT, DATE_STAMP_FORMAT, REQUISITION_PREFIX, REQUISITION_SEQ_WIDTH
)
from core.exceptions import NotFoundError
from services.data_service import DataService
from schemas.requisition import RequisitionCreate

logger = logging.getLogger(__name__)


class RequisitionService:
    """原料仓库领料单"""

    def __init__(self, data_service: DataService, clock: Callable[[], datetime] = datetime.now):
        self.data_service = data_service
        self.clock = clock

    def list_requisitions(self, order_id: Optional[int] = None) -> List[Dict[str, Any]]:
        requisitions = self.data_service.load_data()[DataCategory.MATERIAL_REQUISITIONS.value]
        if order_id is not None:
            requisitions = [r for r in requisitions if r.get("order_id") == order_id]
        return sorted(requisitions, key=lambda r: r["id"], reverse=True)

    @staticmethod
    def next_req_number(requisitions: List[Dict[str, Any]], now: datetime) -> str:
        """LL-YYYYMMDD-NNN，NNN 为当天已有领料单数量 + 1"""
        stamp = now.strftime(DATE_STAMP_FORMAT)
        same_day = sum(1 for r in requisitions if stamp in (r.get("req_number") or ""))
        return f"{REQUISITION_PREFIX}-{stamp}-{same_day + 1:0{REQUISITION_SEQ_WIDTH}d}"

    def create_requisition(self, payload: RequisitionCreate) -> Dict[str, Any]:
        now = self.clock()
        with self.data_service.transaction() as data:
            requisitions = data[DataCategory.MATERIAL_REQUISITIONS.value]
            requisition = {
                "id": self.data_service.next_id(data),
                "req_number": self.next_req_number(requisitions, now),
                "date": payload.date or now.strftime(DATE_FORMAT),
                "order_id": payload.order_id,
                "order_number": payload.order_number or "",
                "material": payload.material or "",
                "requested_weight_kg": payload.requested_weight_kg,
                "applicant": payload.applicant or "",
                "notes": payload.notes or "",
                "status": RequisitionStatus.PENDING_ISSUE.value,
                "issued_at": None,
                "created_at": now.strftime(DATETIME_FORMAT),
            }
            requisitions.append(requisition)

        logger.info(f"Requisition {requisition['req_number']} created for {requisition['material']}")
        return requisition

    def update_status(self, requisition_id: int, status: str) -> Dict[str, Any]:
        """修改状态；改为已出库时记录出库时间"""
        with self.data_service.transaction() as data:
            requisition = next((r for r in data[DataCategory.MATERIAL_REQUISITIONS.value]
                                if r["id"] == requisition_id), None)
            if requisition is None:
                raise NotFoundError()
            requisition["status"] = status
            if status == RequisitionStatus.ISSUED.value:
                requisition["issued_at"] = self.clock().strftime(DATETIME_FORMAT)

        logger.info(f"Requisition {requisition_id} status -> {status}")
        return requisition

    def delete_requisition(self, requisition_id: int) -> None:
        with self.data_service.transaction() as data:
            key = DataCategory.MATERIAL_REQUISITIONS.value
            data[key] = [r for r in data[key] if r["id"] != requisition_id]
        logger.info(f"Requisition {requisition_id} deleted")
