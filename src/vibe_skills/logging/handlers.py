"""
自定义日志处理器

功能:
- ErrorOnlyHandler: 只记录 ERROR/CRITICAL 级别日志
- ColoredConsoleHandler: 彩色控制台输出
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import TextIO


class ErrorOnlyHandler(TimedRotatingFileHandler):
    """
    只记录 ERROR 和 CRITICAL 级别日志的处理器

    继承 TimedRotatingFileHandler，按天轮转
    """

    def emit(self, record: logging.LogRecord) -> None:
        """只处理 ERROR 及以上级别"""
        if record.levelno >= logging.ERROR:
            super().emit(record)


class ColoredConsoleHandler(logging.StreamHandler):
    """
    彩色控制台日志处理器

    不同级别使用不同颜色:
    - DEBUG: 灰色
    - INFO: 默认
    - WARNING: 黄色
    - ERROR: 红色
    - CRITICAL: 红色加粗
    """

    # ANSI 颜色码
    COLORS = {
        logging.DEBUG: "\033[90m",  # 灰色
        logging.INFO: "\033[0m",  # 默认
        logging.WARNING: "\033[93m",  # 黄色
        logging.ERROR: "\033[91m",  # 红色
        logging.CRITICAL: "\033[91;1m",  # 红色加粗
    }
    RESET = "\033[0m"

    def __init__(self, stream: TextIO | None = None):
        super().__init__(stream or sys.stderr)
        self._supports_color = self._check_color_support()

    def _check_color_support(self) -> bool:
        """检测终端是否支持颜色"""
        if sys.platform == "win32":
            try:
                import ctypes

                kernel32 = ctypes.windll.kernel32
                # ENABLE_PROCESSED_OUTPUT | ENABLE_WRAP_AT_EOL_OUTPUT | ENABLE_VIRTUAL_TERMINAL_PROCESSING
                kernel32.SetConsoleMode(kernel32.GetStdHandle(-12), 7)  # STD_ERROR_HANDLE
                return True
            except (AttributeError, OSError):
                return False

        return hasattr(self.stream, "isatty") and self.stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """格式化日志记录，添加颜色"""
        message = super().format(record)

        if self._supports_color:
            color = self.COLORS.get(record.levelno, self.RESET)
            return f"{color}{message}{self.RESET}"

        return message
