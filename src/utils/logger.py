import logging
import sys
from logging.handlers import RotatingFileHandler
from config import LOG_FILE

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name=None, log_file=LOG_FILE, level=logging.INFO):
    """
    配置并返回一个 logger 实例

    name 为 None 时配置根 logger，各模块通过 logging.getLogger(__name__)
    输出的日志都会写入同一文件与控制台。
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 如果已经有 handler，就不重复添加了
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10*1024*1024, backupCount=5, encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    return logger
