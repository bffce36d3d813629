"""
结构化错误

提供 SkillsError 异常类和 ErrorType 枚举，
让 CLI 能根据错误类型给出提示：检查名称 / 使用 --force / 稍后重试。

Usage:
    from vibe_skills.errors import SkillNotFoundError

    raise SkillNotFoundError("commit-convention")
"""

import json
import logging
from enum import Enum
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """错误类型"""

    NOT_FOUND = "not_found"  # 注册表中不存在该技能
    ALREADY_EXISTS = "already_exists"  # 技能已安装，需 --force 覆盖
    NOT_INSTALLED = "not_installed"  # 删除未安装的技能
    NETWORK = "network"  # 网络错误、HTTP 非 200，可重试
    PARSE = "parse"  # registry.json 格式错误
    IO = "io"  # 本地文件读写失败
    VALIDATION = "validation"  # 参数或路径不合法


# 面向用户的提示，CLI 在错误信息后附加显示
_ERROR_TYPE_HINTS: dict[ErrorType, str] = {
    ErrorType.NOT_FOUND: "run 'vibe-skills search <query>' to find available skills",
    ErrorType.ALREADY_EXISTS: "use --force to overwrite",
    ErrorType.NOT_INSTALLED: "run 'vibe-skills list --installed' to see installed skills",
    ErrorType.NETWORK: "check your network connection or try again later",
    ErrorType.PARSE: "the registry index is malformed; try --ref with another ref",
    ErrorType.IO: "check file permissions of the target directory",
    ErrorType.VALIDATION: "",
}


class SkillsError(Exception):
    """
    结构化错误基类。

    包含错误类型和附加信息，CLI 统一捕获后输出。
    """

    error_type: ErrorType = ErrorType.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        error_type: ErrorType | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if error_type is not None:
            self.error_type = error_type
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def hint(self) -> str:
        return _ERROR_TYPE_HINTS.get(self.error_type, "")

    def to_dict(self) -> dict[str, Any]:
        """序列化为字典"""
        result: dict[str, Any] = {
            "error": True,
            "error_type": self.error_type.value,
            "message": self.message,
        }
        if self.hint:
            result["hint"] = self.hint
        if self.details:
            result["details"] = self.details
        return result

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


class SkillNotFoundError(SkillsError):
    """注册表中找不到技能"""

    error_type = ErrorType.NOT_FOUND

    def __init__(self, name: str) -> None:
        super().__init__(f"skill not found: {name}", details={"name": name})
        self.name = name


class SkillNotInstalledError(SkillsError):
    """技能未安装"""

    error_type = ErrorType.NOT_INSTALLED

    def __init__(self, name: str) -> None:
        super().__init__(f"skill not installed: {name}", details={"name": name})
        self.name = name


class SkillAlreadyInstalledError(SkillsError):
    """技能已安装且未指定覆盖"""

    error_type = ErrorType.ALREADY_EXISTS

    def __init__(self, name: str) -> None:
        super().__init__(f"skill already installed: {name}", details={"name": name})
        self.name = name


class RegistryFetchError(SkillsError):
    """从注册表获取内容失败"""

    error_type = ErrorType.NETWORK


class RegistryParseError(SkillsError):
    """注册表索引无法解析"""

    error_type = ErrorType.PARSE


class InstallError(SkillsError):
    """写入目标目录失败"""

    error_type = ErrorType.IO


class ConfigError(SkillsError):
    """配置值不合法"""

    error_type = ErrorType.VALIDATION


def classify_error(error: Exception) -> SkillsError:
    """
    将通用异常分类为结构化 SkillsError。

    - SkillsError -> 原样返回
    - httpx.HTTPError -> NETWORK
    - FileNotFoundError -> NOT_FOUND
    - PermissionError / OSError -> IO
    - ValueError -> VALIDATION
    """
    if isinstance(error, SkillsError):
        return error

    error_msg = str(error) or error.__class__.__name__

    if isinstance(error, httpx.HTTPError):
        return RegistryFetchError(error_msg)

    if isinstance(error, FileNotFoundError):
        return SkillsError(error_msg, error_type=ErrorType.NOT_FOUND)

    if isinstance(error, OSError):
        return InstallError(error_msg)

    if isinstance(error, ValueError):
        return SkillsError(error_msg, error_type=ErrorType.VALIDATION)

    logger.debug(f"Unclassified error: {error!r}")
    return SkillsError(error_msg)
