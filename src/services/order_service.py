import logging
from datetime import datetime
from typing import List, Dict, Any, Optional

from core.enums import OrderType, OrderStatus
from core.constants import DATETIME_FORMAT, IMMUTABLE_ITEM_FIELDS, IMMUTABLE_ORDER_FIELDS
from core.exceptions import NotFoundError
from services.data_service import DataService

logger = logging.getLogger(__name__)


class OrderService:
    """
    订单/明细行 CRUD，每种订单类型 (啤机/搪胶/喷油) 一个实例。

    表头更新为浅合并；明细行在提供 items 时整体替换。
    """

    def __init__(self, data_service: DataService, order_type: OrderType):
        self.data_service = data_service
        self.order_type = OrderType(order_type)

    def _orders(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        return data[self.order_type.orders_key]

    def _items(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        return data[self.order_type.items_key]

    @staticmethod
    def _now() -> str:
        return datetime.now().strftime(DATETIME_FORMAT)

    @staticmethod
    def _items_of(items: List[Dict[str, Any]], order_id: int) -> List[Dict[str, Any]]:
        return sorted((i for i in items if i.get("order_id") == order_id),
                      key=lambda i: i.get("sort_order", 0))

    def _with_items(self, data: Dict[str, Any], order: Dict[str, Any]) -> Dict[str, Any]:
        return {**order, "items": self._items_of(self._items(data), order["id"])}

    def _append_items(self, data: Dict[str, Any], order_id: int, items: List[Dict[str, Any]]) -> None:
        """新明细行: 新ID，sort_order 按数组位置重排"""
        target = self._items(data)
        for position, item in enumerate(items):
            fields = {k: v for k, v in item.items() if k not in IMMUTABLE_ITEM_FIELDS}
            target.append({
                "id": self.data_service.next_id(data),
                "order_id": order_id,
                "sort_order": position,
                **fields,
            })

    # -------------------- 查询 --------------------

    def list_orders(self) -> List[Dict[str, Any]]:
        """全部订单，ID 倒序，附带明细行"""
        data = self.data_service.load_data()
        orders = sorted(self._orders(data), key=lambda o: o["id"], reverse=True)
        return [self._with_items(data, o) for o in orders]

    def get_order(self, order_id: int) -> Dict[str, Any]:
        data = self.data_service.load_data()
        order = next((o for o in self._orders(data) if o["id"] == order_id), None)
        if order is None:
            raise NotFoundError()
        return self._with_items(data, order)

    # -------------------- 写入 --------------------

    def create_order(self, header: Dict[str, Any], items: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        now = self._now()
        with self.data_service.transaction() as data:
            order_id = self.data_service.next_id(data)
            fields = {k: v for k, v in header.items() if k not in IMMUTABLE_ORDER_FIELDS}
            order = {
                "id": order_id,
                **fields,
                "status": header.get("status") or OrderStatus.PENDING.value,
                "created_at": now,
                "updated_at": now,
            }
            self._orders(data).append(order)
            if items:
                self._append_items(data, order_id, items)
            result = self._with_items(data, order)

        logger.info(f"Created {self.order_type.value} order {order_id} with {len(items or [])} items")
        return result

    def update_order(self, order_id: int, header: Dict[str, Any],
                     items: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        """表头浅合并；items 不为 None 时删除原明细行并按新数组重建"""
        with self.data_service.transaction() as data:
            orders = self._orders(data)
            idx = next((i for i, o in enumerate(orders) if o["id"] == order_id), None)
            if idx is None:
                raise NotFoundError()

            fields = {k: v for k, v in header.items() if k not in IMMUTABLE_ORDER_FIELDS}
            orders[idx] = {**orders[idx], **fields, "updated_at": self._now()}

            if items is not None:
                key = self.order_type.items_key
                data[key] = [i for i in data[key] if i.get("order_id") != order_id]
                self._append_items(data, order_id, items)
            result = self._with_items(data, orders[idx])

        logger.info(f"Updated {self.order_type.value} order {order_id}"
                    + (f", replaced items ({len(items)})" if items is not None else ""))
        return result

    def delete_order(self, order_id: int) -> None:
        """删除订单及其全部明细行"""
        with self.data_service.transaction() as data:
            orders_key, items_key = self.order_type.orders_key, self.order_type.items_key
            data[orders_key] = [o for o in data[orders_key] if o["id"] != order_id]
            data[items_key] = [i for i in data[items_key] if i.get("order_id") != order_id]
        logger.info(f"Deleted {self.order_type.value} order {order_id}")

    def update_status(self, order_id: int, status: str) -> bool:
        """仅修改状态与 updated_at；订单不存在时不做任何修改"""
        with self.data_service.transaction() as data:
            order = next((o for o in self._orders(data) if o["id"] == order_id), None)
            if order is not None:
                order["status"] = status
                order["updated_at"] = self._now()

        if order is None:
            logger.warning(f"Status patch ignored, {self.order_type.value} order {order_id} not found")
            return False
        return True

    def patch_items(self, order_id: int, updates: List[Dict[str, Any]]) -> int:
        """
        按 (id, order_id) 局部更新明细行字段，供啤机部/仓库补填实际数据。

        Returns:
            int: 实际更新的明细行数量
        """
        updated = 0
        with self.data_service.transaction() as data:
            items = self._items(data)
            for update in updates:
                item_id = int(update["id"])
                item = next((i for i in items if i["id"] == item_id and i.get("order_id") == order_id), None)
                if item is None:
                    continue
                item.update({k: v for k, v in update.items() if k not in IMMUTABLE_ITEM_FIELDS})
                updated += 1

        logger.info(f"Patched {updated}/{len(updates)} items of {self.order_type.value} order {order_id}")
        return updated
