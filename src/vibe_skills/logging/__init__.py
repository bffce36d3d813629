"""
vibe-skills 日志系统

功能:
- 控制台彩色输出（stderr，不干扰命令输出）
- 可选日志文件（按大小轮转）
- 分离 error.log（只记录 ERROR/CRITICAL）
"""

from .config import get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
]
