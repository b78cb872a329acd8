from werkzeug.routing import BaseConverter, ValidationError

from core.enums import OrderType


class OrderTypeConverter(BaseConverter):
    """URL 中的订单类型，只匹配 injection/slush/spray"""

    regex = "(?:" + "|".join(t.value for t in OrderType) + ")"

    def to_python(self, value):
        try:
            return OrderType(value)
        except ValueError:
            raise ValidationError()

    def to_url(self, value):
        return OrderType(value).value
