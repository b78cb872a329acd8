# 全局常量定义

# 日期时间格式
DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_STAMP_FORMAT = "%Y%m%d"

# 领料单编号: LL-YYYYMMDD-NNN
REQUISITION_PREFIX = "LL"
REQUISITION_SEQ_WIDTH = 3

# 明细行中不可通过局部更新修改的字段
IMMUTABLE_ITEM_FIELDS = ("id", "order_id", "sort_order")
# 订单表头中不可通过更新修改的字段
IMMUTABLE_ORDER_FIELDS = ("id", "created_at")

NOT_FOUND_MESSAGE = "未找到"

# 全局自增 ID 计数器字段
NEXT_ID_KEY = "nextId"
