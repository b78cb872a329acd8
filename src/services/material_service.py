"""
Material Service Module
原料价格表、原料用量汇总统计、啤办费用汇总及其 Excel 导出。
"""

import logging
from io import BytesIO
from typing import List, Dict, Any, Optional, Set

import pandas as pd

from core.enums import DataCategory, OrderType
from services.data_service import DataService
from utils.number_helper import to_float

logger = logging.getLogger(__name__)

MATERIAL_STATS_COLUMNS = {
    "seq": "序号",
    "material": "原料",
    "unit_price": "单价",
    "notes": "备注",
    "total_actual_weight": "实际用量(kg)",
    "total_amount": "实际金额(HKD)",
}

INJECTION_COST_COLUMNS = {
    "order_number": "订单编号",
    "doc_number": "单据编号",
    "date": "日期",
    "workshop": "车间",
    "mold_id": "模具编号",
    "mold_name": "模具名称",
    "injection_cost": "啤办费用",
    "notes": "备注",
}


def _matches_month(order: Dict[str, Any], month: Optional[str]) -> bool:
    return not month or str(order.get("date") or "").startswith(month)


class MaterialService:
    def __init__(self, data_service: DataService):
        self.data_service = data_service

    # ------------------ 价格表 ------------------

    def get_prices(self) -> Any:
        """当前价格表；旧数据文件缺少价格表时读取时已补为默认价格"""
        return self.data_service.load_data()[DataCategory.MATERIAL_PRICES.value]

    def replace_prices(self, prices: Any) -> Any:
        """整表覆盖，不做逐条合并与格式校验"""
        with self.data_service.transaction() as data:
            data[DataCategory.MATERIAL_PRICES.value] = prices
        logger.info(f"Material price table replaced ({len(prices) if isinstance(prices, list) else 'non-list'} entries)")
        return prices

    # ------------------ 用量统计 ------------------

    @staticmethod
    def _matching_order_ids(orders: List[Dict[str, Any]], month: Optional[str],
                            order_number: Optional[str]) -> Set[int]:
        q = (order_number or "").lower()
        ids = set()
        for o in orders:
            if not _matches_month(o, month):
                continue
            numbers = f"{o.get('order_number') or ''}{o.get('doc_number') or ''}"
            if q and q not in numbers.lower():
                continue
            ids.add(o["id"])
        return ids

    def get_material_stats(self, month: Optional[str] = None,
                           order_number: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        按原料汇总啤机明细行的仓库实填重量与金额。

        价格表中的原料全部列出 (无用量时为 0)；明细行引用了价格表外的原料时，
        追加单价为 0 的条目。指定月份或订单编号时，只统计匹配订单的明细行。

        Args:
            month: YYYY-MM，按订单日期前缀匹配
            order_number: 订单编号/单据编号模糊搜索 (不区分大小写)
        """
        data = self.data_service.load_data()

        stats: Dict[str, Dict[str, Any]] = {}
        for i, price in enumerate(data[DataCategory.MATERIAL_PRICES.value]):
            if not isinstance(price, dict):
                continue
            stats[str(price.get("material"))] = {
                "seq": i + 1,
                "material": price.get("material"),
                "unit_price": price.get("unit_price"),
                "notes": price.get("notes") or "",
                "total_actual_weight": 0,
                "total_amount": 0,
            }

        valid_order_ids = None
        if month or order_number:
            valid_order_ids = self._matching_order_ids(
                data[OrderType.INJECTION.orders_key], month, order_number)

        for item in data[OrderType.INJECTION.items_key]:
            material = item.get("material")
            if not material:
                continue
            if valid_order_ids is not None and item.get("order_id") not in valid_order_ids:
                continue
            # 明细行字段原样保存，数字或列表统一按字符串归入价格表条目
            key = str(material)
            if key not in stats:
                stats[key] = {
                    "seq": len(stats) + 1,
                    "material": key,
                    "unit_price": 0,
                    "notes": "",
                    "total_actual_weight": 0,
                    "total_amount": 0,
                }
            entry = stats[key]
            entry["total_actual_weight"] += to_float(item.get("actual_weight_kg"))
            entry["total_amount"] += to_float(item.get("actual_amount_hkd"))

        return list(stats.values())

    # ------------------ 啤办费用 ------------------

    def get_injection_costs(self, month: Optional[str] = None) -> List[Dict[str, Any]]:
        """啤机订单表头与明细行展开为费用行，按订单存储顺序、明细行 sort_order 排列"""
        data = self.data_service.load_data()
        orders = [o for o in data[OrderType.INJECTION.orders_key] if _matches_month(o, month)]
        items = data[OrderType.INJECTION.items_key]

        rows = []
        for o in orders:
            order_items = sorted((i for i in items if i.get("order_id") == o["id"]),
                                 key=lambda i: i.get("sort_order", 0))
            for it in order_items:
                rows.append({
                    "order_number": o.get("order_number") or "",
                    "doc_number": o.get("doc_number") or "",
                    "date": o.get("date") or "",
                    "workshop": o.get("workshop") or "",
                    "mold_id": it.get("mold_id") or "",
                    "mold_name": it.get("mold_name") or "",
                    "injection_cost": it.get("injection_cost") or None,
                    "notes": it.get("notes") or "",
                })
        return rows

    # ------------------ Excel 导出 ------------------

    @staticmethod
    def _to_excel(records: List[Dict[str, Any]], columns: Dict[str, str], sheet_name: str) -> bytes:
        df = pd.DataFrame(records, columns=list(columns.keys())).rename(columns=columns)
        output = BytesIO()
        with pd.ExcelWriter(output, engine='openpyxl') as writer:
            df.to_excel(writer, sheet_name=sheet_name, index=False)
        return output.getvalue()

    def export_material_stats_excel(self, month: Optional[str] = None,
                                    order_number: Optional[str] = None) -> bytes:
        stats = self.get_material_stats(month, order_number)
        return self._to_excel(stats, MATERIAL_STATS_COLUMNS, "原料用量汇总")

    def export_injection_costs_excel(self, month: Optional[str] = None) -> bytes:
        rows = self.get_injection_costs(month)
        return self._to_excel(rows, INJECTION_COST_COLUMNS, "啤办费用汇总")
