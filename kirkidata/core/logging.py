import logging
import sys

from loguru import logger


class InterceptHandler(logging.Handler):
    """把標準 logging 的紀錄轉送到 loguru（各模組仍用 logging.getLogger）"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO"):
    logger.remove()
    logger.add(sys.stdout, level=level.upper(),
               backtrace=True, diagnose=False,
               format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level}</level> | {message}")
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    return logger
