from typing import Any, Dict
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    基础模型，配置了 Pydantic V2 的通用设置
    """
    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        coerce_numbers_to_str=True,  # 单号等字段前端可能传数字
        extra='ignore'               # 忽略多余字段
    )


class FreeFormSchema(BaseSchema):
    """
    允许任意附加字段的模型，订单表头与明细行的业务字段由各部门自由填写
    """
    model_config = ConfigDict(extra='allow')

    def supplied_fields(self, exclude=()) -> Dict[str, Any]:
        """返回请求中实际提供的字段（含附加字段）"""
        data = self.model_dump()
        supplied = set(self.model_fields_set) | set(self.model_extra or {})
        return {k: v for k, v in data.items() if k in supplied and k not in exclude}


def blank_to_none(v: Any) -> Any:
    """空字符串视为未填写"""
    if isinstance(v, str) and not v.strip():
        return None
    return v
