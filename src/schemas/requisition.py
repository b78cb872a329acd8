from typing import Optional
from pydantic import Field, field_validator

from utils.number_helper import to_float
from .base import BaseSchema, blank_to_none


class RequisitionCreate(BaseSchema):
    date: Optional[str] = Field(None, description="领料日期 YYYY-MM-DD，默认当天")
    order_id: Optional[int] = Field(None, description="关联订单ID")
    order_number: Optional[str] = Field("", description="订单编号")
    material: Optional[str] = Field("", description="原料名称")
    requested_weight_kg: float = Field(0.0, description="申领重量 (kg)")
    applicant: Optional[str] = Field("", description="申请人")
    notes: Optional[str] = Field("", description="备注")

    @field_validator('date', 'order_id', mode='before')
    @classmethod
    def parse_blank(cls, v):
        return blank_to_none(v)

    @field_validator('requested_weight_kg', mode='before')
    @classmethod
    def parse_weight(cls, v):
        return to_float(v)
