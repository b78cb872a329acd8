from typing import Optional
from pydantic import Field, field_validator

from .base import BaseSchema, blank_to_none


class ProblemCreate(BaseSchema):
    order_type: Optional[str] = Field(None, description="订单类型 injection/slush/spray")
    order_id: Optional[int] = Field(None, description="关联订单ID")
    order_number: Optional[str] = Field(None, description="订单编号")
    description: Optional[str] = Field(None, description="问题描述")
    reported_by: Optional[str] = Field(None, description="反馈人")

    @field_validator('order_id', mode='before')
    @classmethod
    def parse_order_id(cls, v):
        return blank_to_none(v)
