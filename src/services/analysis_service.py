"""
Analysis Service Module
Order counts per production stage for the dashboard.
"""

import logging
from typing import Dict, Any, List, Optional

from core.enums import OrderType, OrderStatus
from services.data_service import DataService

logger = logging.getLogger(__name__)


class AnalysisService:
    """Service for aggregate order statistics."""

    def __init__(self, data_service: DataService):
        self.data_service = data_service

    @staticmethod
    def _count(orders: List[Dict[str, Any]], status: Optional[OrderStatus] = None) -> int:
        if status is None:
            return len(orders)
        return sum(1 for o in orders if o.get("status") == status.value)

    def get_order_stats(self) -> Dict[str, Dict[str, int]]:
        """Total and per-status counts for each order type."""
        data = self.data_service.load_data()
        stats = {}
        for order_type in OrderType:
            orders = data[order_type.orders_key]
            stats[order_type.value] = {
                "total": self._count(orders),
                "pending": self._count(orders, OrderStatus.PENDING),
                "inProgress": self._count(orders, OrderStatus.IN_PROGRESS),
                "done": self._count(orders, OrderStatus.DONE),
            }
        return stats
