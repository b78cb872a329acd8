import logging
from datetime import datetime
from typing import List, Dict, Any, Optional

from core.enums import DataCategory, ProblemStatus
from core.constants import DATETIME_FORMAT
from core.exceptions import NotFoundError
from services.data_service import DataService
from schemas.problem import ProblemCreate

logger = logging.getLogger(__name__)


class ProblemService:
    """生产问题反馈"""

    def __init__(self, data_service: DataService):
        self.data_service = data_service

    def list_problems(self, order_type: Optional[str] = None, order_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """按订单类型/订单ID过滤 (条件同时满足)，ID 倒序"""
        problems = self.data_service.load_data()[DataCategory.PROBLEMS.value]
        if order_type:
            problems = [p for p in problems if p.get("order_type") == order_type]
        if order_id is not None:
            problems = [p for p in problems if p.get("order_id") == order_id]
        return sorted(problems, key=lambda p: p["id"], reverse=True)

    def create_problem(self, payload: ProblemCreate) -> Dict[str, Any]:
        with self.data_service.transaction() as data:
            problem = {
                "id": self.data_service.next_id(data),
                "order_type": payload.order_type,
                "order_id": payload.order_id,
                "order_number": payload.order_number,
                "description": payload.description,
                "reported_by": payload.reported_by,
                "status": ProblemStatus.PENDING.value,
                "created_at": datetime.now().strftime(DATETIME_FORMAT),
                "resolved_at": None,
            }
            data[DataCategory.PROBLEMS.value].append(problem)

        logger.info(f"Problem {problem['id']} reported for {payload.order_type} order {payload.order_id}")
        return problem

    def resolve_problem(self, problem_id: int) -> Dict[str, Any]:
        with self.data_service.transaction() as data:
            problem = next((p for p in data[DataCategory.PROBLEMS.value] if p["id"] == problem_id), None)
            if problem is None:
                raise NotFoundError()
            problem["status"] = ProblemStatus.RESOLVED.value
            problem["resolved_at"] = datetime.now().strftime(DATETIME_FORMAT)

        logger.info(f"Problem {problem_id} resolved")
        return problem
