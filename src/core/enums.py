from enum import Enum


class OrderType(str, Enum):
    INJECTION = "injection"
    SLUSH = "slush"
    SPRAY = "spray"

    @property
    def orders_key(self) -> str:
        return f"{self.value}_orders"

    @property
    def items_key(self) -> str:
        return f"{self.value}_items"


class OrderStatus(str, Enum):
    PENDING = "待生产"
    IN_PROGRESS = "生产中"
    DONE = "已完成"


class ProblemStatus(str, Enum):
    PENDING = "待处理"
    RESOLVED = "已解决"


class RequisitionStatus(str, Enum):
    PENDING_ISSUE = "待出库"
    ISSUED = "已出库"


class DataCategory(str, Enum):
    INJECTION_ORDERS = "injection_orders"
    INJECTION_ITEMS = "injection_items"
    SLUSH_ORDERS = "slush_orders"
    SLUSH_ITEMS = "slush_items"
    SPRAY_ORDERS = "spray_orders"
    SPRAY_ITEMS = "spray_items"
    PROBLEMS = "problems"
    MATERIAL_PRICES = "material_prices"
    MATERIAL_REQUISITIONS = "material_requisitions"

