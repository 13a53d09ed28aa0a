import logging

from .config import LOG_LEVEL


def setup_logging(level: str = LOG_LEVEL) -> None:
    """配置全局日志格式：时间 | 级别 | 模块 | 消息。"""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
