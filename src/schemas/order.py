from typing import Any, Dict, List, Optional
from pydantic import Field

from .base import BaseSchema, FreeFormSchema


class OrderPayload(FreeFormSchema):
    """新建/更新订单请求体: 表头字段 + 可选明细行"""
    status: Optional[str] = Field(None, description="订单状态")
    items: Optional[List[Dict[str, Any]]] = Field(None, description="明细行，提供时整体替换")

    def header(self) -> Dict[str, Any]:
        return self.supplied_fields(exclude=("items",))


class StatusUpdate(BaseSchema):
    status: str = Field(..., description="新状态")


class ItemUpdate(FreeFormSchema):
    """明细行局部更新，id 之外的字段合并进明细行"""
    id: int = Field(..., description="明细行ID")


class ItemPatchRequest(BaseSchema):
    updates: List[ItemUpdate] = []
