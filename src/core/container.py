from typing import Dict, Optional

from core.enums import OrderType
from services.data_service import DataService
from services.order_service import OrderService
from services.problem_service import ProblemService
from services.material_service import MaterialService
from services.requisition_service import RequisitionService
from services.analysis_service import AnalysisService


class ServiceContainer:
    """
    服务容器 (Service Container)
    负责初始化并管理所有业务服务实例，实现依赖注入。
    """
    def __init__(self, data_service: Optional[DataService] = None):
        # 1. 核心数据服务: JSON 文件读写、事务与全局 ID
        self.data_service = data_service or DataService()

        # 2. 业务服务共享同一个 data_service，保证同一把锁
        self.order_services: Dict[OrderType, OrderService] = {
            order_type: OrderService(self.data_service, order_type) for order_type in OrderType
        }
        self.problem_service = ProblemService(self.data_service)
        self.material_service = MaterialService(self.data_service)
        self.requisition_service = RequisitionService(self.data_service)
        self.analysis_service = AnalysisService(self.data_service)

    def orders(self, order_type: OrderType) -> OrderService:
        return self.order_services[OrderType(order_type)]
