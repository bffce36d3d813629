"""
日志配置和初始化

功能:
- 配置根日志记录器
- 设置控制台处理器
- 设置文件处理器（按大小轮转）
- 设置错误日志处理器（只记录 ERROR/CRITICAL）
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .handlers import ColoredConsoleHandler, ErrorOnlyHandler


def setup_logging(
    log_dir: Path | None = None,
    log_level: str = "WARNING",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    log_file_prefix: str = "vibe-skills",
    log_max_size_mb: int = 5,
    log_backup_count: int = 3,
    log_to_console: bool = True,
    log_to_file: bool = False,
) -> logging.Logger:
    """
    配置日志系统

    Args:
        log_dir: 日志目录
        log_level: 控制台日志级别
        log_format: 日志格式
        log_file_prefix: 日志文件前缀
        log_max_size_mb: 单个日志文件最大大小（MB）
        log_backup_count: 保留的日志文件数量
        log_to_console: 是否输出到控制台
        log_to_file: 是否输出到文件

    Returns:
        根日志记录器
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    # 文件处理器始终记录 DEBUG，根记录器需放行
    root_logger.setLevel(logging.DEBUG if (log_to_file and log_dir) else level)

    root_logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    if log_to_console:
        console_handler = ColoredConsoleHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root_logger.addHandler(console_handler)

    if log_to_file and log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        main_handler = RotatingFileHandler(
            log_dir / f"{log_file_prefix}.log",
            maxBytes=log_max_size_mb * 1024 * 1024,
            backupCount=log_backup_count,
            encoding="utf-8",
        )
        main_handler.setLevel(logging.DEBUG)
        main_handler.setFormatter(formatter)
        root_logger.addHandler(main_handler)

        error_handler = ErrorOnlyHandler(
            log_dir / "error.log",
            when="midnight",
            interval=1,
            backupCount=log_backup_count,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        root_logger.addHandler(error_handler)

    # 减少第三方库的日志输出
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    获取指定名称的日志记录器

    Args:
        name: 日志记录器名称

    Returns:
        日志记录器
    """
    return logging.getLogger(name)
