"""
数值转换工具
前端填写的重量、金额可能是数字、数字字符串或空值，统计前统一转换。
"""

from typing import Any


def to_float(value: Any, default: float = 0.0) -> float:
    """转换为 float，空值或无法解析时返回 default"""
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    # NaN
    if result != result:
        return default
    return result

