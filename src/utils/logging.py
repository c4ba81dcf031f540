"""
日志配置
"""

import logging
import sys

from .constants import LOG_LEVEL

ROOT_LOGGER = "toyc"


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """
    返回 toyc 命名空间下的记录器。

    处理器只挂在根记录器 toyc 上，编译器核心模块的 toyc.lexer、toyc.parser
    等记录器通过传播共用同一输出。
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
        handler = logging.StreamHandler(stream=sys.stderr)
        fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        handler.setFormatter(fmt)
        root.addHandler(handler)
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def set_level(level: str) -> None:
    get_logger().setLevel(getattr(logging, level.upper(), logging.INFO))
