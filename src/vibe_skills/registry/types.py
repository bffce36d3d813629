"""
注册表数据类型

Skill 描述一个技能，RegistryIndex 对应 registry.json 的结构:

    {
      "version": "1",
      "skills": [
        {"name": "commit-convention", "stack": "common",
         "description": "...", "path": "common/commit-convention/SKILL.md",
         "files": ["templates/commit.txt"]}
      ]
    }
"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from posixpath import dirname
from typing import Any

from ..errors import RegistryParseError


def safe_segment(value: str, field_name: str = "name") -> str:
    """校验单个路径段（技能名、技术栈名）"""
    if not value or value in (".", "..") or "/" in value or "\\" in value:
        raise RegistryParseError(f"invalid skill {field_name}: {value!r}")
    return value


def safe_relative_path(relative_path: str) -> PurePosixPath:
    """校验相对路径不会逃出所在目录"""
    path = PurePosixPath(relative_path)
    if (
        not relative_path
        or path.is_absolute()
        or ".." in path.parts
        or "\\" in relative_path
    ):
        raise RegistryParseError(f"unsafe file path in skill: {relative_path}")
    return path


@dataclass
class Skill:
    """技能描述"""

    name: str  # 技能名 (commit-convention)
    stack: str  # 技术栈 (common, dotnet, python, ...)
    path: str  # SKILL.md 相对注册表 skills/ 根目录的路径
    description: str = ""
    files: list[str] = field(default_factory=list)  # 多文件技能的附加文件，相对技能目录

    @property
    def full_name(self) -> str:
        """stack/name 形式的全名"""
        return f"{self.stack}/{self.name}"

    @property
    def directory(self) -> str:
        """技能目录（相对 skills/ 根目录）"""
        return dirname(self.path)

    def matches(self, name: str) -> bool:
        """按名称或 stack/name 匹配"""
        return name == self.name or name == self.full_name

    @classmethod
    def from_dict(cls, data: Any) -> "Skill":
        if not isinstance(data, dict):
            raise RegistryParseError(f"invalid skill entry: {data!r}")

        missing = [k for k in ("name", "stack", "path") if not data.get(k)]
        if missing:
            raise RegistryParseError(
                f"skill entry missing {', '.join(missing)}: {data!r}",
                details={"missing": missing},
            )

        files = data.get("files") or []
        if not isinstance(files, list):
            raise RegistryParseError(f"skill {data['name']}: 'files' must be a list")

        # 名称和路径会直接用于本地目录与下载 URL
        name = safe_segment(str(data["name"]), "name")
        stack = safe_segment(str(data["stack"]), "stack")
        path = str(data["path"])
        safe_relative_path(path)
        files = [str(f) for f in files]
        for relative_path in files:
            safe_relative_path(relative_path)

        return cls(
            name=name,
            stack=stack,
            path=path,
            description=str(data.get("description") or ""),
            files=files,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "stack": self.stack,
            "description": self.description,
            "path": self.path,
        }
        if self.files:
            result["files"] = list(self.files)
        return result


@dataclass
class RegistryIndex:
    """registry.json 结构"""

    version: str = ""
    skills: list[Skill] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "RegistryIndex":
        if not isinstance(data, dict):
            raise RegistryParseError("registry index must be a JSON object")

        skills = data.get("skills", [])
        if not isinstance(skills, list):
            raise RegistryParseError("registry index 'skills' must be a list")

        return cls(
            version=str(data.get("version") or ""),
            skills=[Skill.from_dict(item) for item in skills],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "skills": [s.to_dict() for s in self.skills],
        }
