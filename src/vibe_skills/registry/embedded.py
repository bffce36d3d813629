"""
内置技能注册表

技能随包分发，目录结构:

    vibe_skills/
      builtin_skills/
        <stack>/<skill-name>/SKILL.md
        <stack>/<skill-name>/<附加文件...>

只有恰好位于 <stack>/<name>/SKILL.md 位置的文件被视为技能。
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml

from ..errors import RegistryFetchError
from .base import SKILL_FILE, SkillRegistry
from .types import RegistryIndex, Skill

logger = logging.getLogger(__name__)

MAX_DESCRIPTION_LENGTH = 100

_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n|$)", re.DOTALL)


def builtin_skills_root() -> Path:
    """随包分发的内置技能目录"""
    return Path(__file__).resolve().parents[1] / "builtin_skills"


def _truncate(text: str) -> str:
    if len(text) > MAX_DESCRIPTION_LENGTH:
        return text[:MAX_DESCRIPTION_LENGTH] + "..."
    return text


def extract_description(content: str) -> str:
    """
    提取技能描述

    优先使用 YAML frontmatter 的 description 字段，
    否则取第一个非空、非标题行；超过 100 字符截断并追加 "..."。
    """
    body = content
    match = _FRONTMATTER_RE.match(content)
    if match:
        try:
            metadata = yaml.safe_load(match.group(1))
        except yaml.YAMLError as e:
            logger.debug(f"Invalid frontmatter, falling back to body: {e}")
            metadata = None
        if isinstance(metadata, dict) and metadata.get("description"):
            return _truncate(" ".join(str(metadata["description"]).split()))
        body = content[match.end():]

    for line in body.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        return _truncate(line)
    return ""


class EmbeddedRegistry(SkillRegistry):
    """
    内置技能注册表

    构造时扫描技能目录，之后所有操作都在内存列表上进行。
    """

    def __init__(self, root: Path | None = None):
        self.root = Path(root) if root is not None else builtin_skills_root()
        self._skills: list[Skill] = self._load()

    def _load(self) -> list[Skill]:
        if not self.root.is_dir():
            logger.warning(f"Embedded skills directory not found: {self.root}")
            return []

        skills: list[Skill] = []
        for skill_md in sorted(self.root.rglob(SKILL_FILE)):
            relative = skill_md.relative_to(self.root)
            # <stack>/<name>/SKILL.md
            if len(relative.parts) != 3 or not skill_md.is_file():
                continue

            stack, name = relative.parts[0], relative.parts[1]
            try:
                content = skill_md.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable skill {stack}/{name}: {e}")
                continue

            skill_dir = skill_md.parent
            extra_files = sorted(
                p.relative_to(skill_dir).as_posix()
                for p in skill_dir.rglob("*")
                if p.is_file()
                and p != skill_md
                and not any(part.startswith(".") for part in p.relative_to(skill_dir).parts)
            )

            skills.append(
                Skill(
                    name=name,
                    stack=stack,
                    path=relative.as_posix(),
                    description=extract_description(content),
                    files=extra_files,
                )
            )

        logger.debug(f"Loaded {len(skills)} embedded skills from {self.root}")
        return skills

    def list(self) -> list[Skill]:
        return list(self._skills)

    def get_content(self, skill: Skill) -> bytes:
        return self._read(self.root / skill.path)

    def _get_file(self, skill: Skill, relative_path: str) -> bytes:
        return self._read(self.root / skill.directory / relative_path)

    def to_index(self, version: str = "1") -> RegistryIndex:
        """生成 registry.json 索引（用于发布远程注册表）"""
        return RegistryIndex(version=version, skills=self.list())

    def _read(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            raise RegistryFetchError(
                f"failed to read embedded file {path}: {e}",
                details={"path": str(path)},
            ) from e

    def __repr__(self) -> str:
        return f"<EmbeddedRegistry root={self.root} skills={len(self._skills)}>"
