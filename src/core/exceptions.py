from core.constants import NOT_FOUND_MESSAGE


class NotFoundError(Exception):
    """请求的实体不存在"""

    def __init__(self, message: str = NOT_FOUND_MESSAGE):
        super().__init__(message)


class DataStoreError(Exception):
    """数据文件写入失败"""
