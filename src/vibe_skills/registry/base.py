"""
技能注册表基类

定义所有注册表必须实现的接口。查找、过滤、搜索基于 list() 在基类中统一实现。
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..errors import SkillNotFoundError
from .types import Skill, safe_relative_path

SKILL_FILE = "SKILL.md"


class SkillRegistry(ABC):
    """技能注册表基类"""

    @abstractmethod
    def list(self) -> list[Skill]:
        """
        获取全部技能

        Returns:
            技能列表（保持索引顺序）
        """

    @abstractmethod
    def get_content(self, skill: Skill) -> bytes:
        """
        获取技能 SKILL.md 内容

        Raises:
            RegistryFetchError: 内容不存在或读取失败
        """

    @abstractmethod
    def _get_file(self, skill: Skill, relative_path: str) -> bytes:
        """读取技能目录下的单个附加文件"""

    def list_by_stack(self, stack: str) -> list[Skill]:
        """按技术栈过滤"""
        return [s for s in self.list() if s.stack == stack]

    def get_stacks(self) -> list[str]:
        """所有技术栈名称（排序、去重）"""
        return sorted({s.stack for s in self.list()})

    def find(self, name: str) -> Skill:
        """
        按名称查找技能

        支持 "skill-name" 和 "stack/skill-name" 两种写法，返回第一个匹配项。

        Raises:
            SkillNotFoundError: 未找到
        """
        for skill in self.list():
            if skill.matches(name):
                return skill
        raise SkillNotFoundError(name)

    def search(self, query: str) -> list[Skill]:
        """
        搜索技能

        对名称、描述、技术栈做不区分大小写的子串匹配。
        """
        query = query.lower()
        return [
            s
            for s in self.list()
            if query in s.name.lower()
            or query in s.description.lower()
            or query in s.stack.lower()
        ]

    def get_files(self, skill: Skill) -> dict[str, bytes]:
        """
        获取技能的全部文件

        Returns:
            相对技能目录的路径 -> 内容，始终包含 SKILL.md

        Raises:
            RegistryParseError: 附加文件路径逃出技能目录（此时不会读取任何文件）
        """
        safe_relative_path(skill.path)
        extra = [p for p in skill.files if p != SKILL_FILE]
        for relative_path in extra:
            safe_relative_path(relative_path)

        files = {SKILL_FILE: self.get_content(skill)}
        for relative_path in extra:
            files[relative_path] = self._get_file(skill, relative_path)
        return files

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
