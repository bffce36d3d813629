"""
技能安装器

将注册表中的技能写入项目目录:

    <project>/.claude/skills/<skill-name>/SKILL.md
    <project>/.claude/skills/<skill-name>/<附加文件...>

安装状态完全通过目录检查得出，不维护额外的状态文件。
旧版本安装的单文件布局 (<skill-name>.md) 同样被识别和删除。
"""

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from .errors import (
    InstallError,
    RegistryParseError,
    SkillAlreadyInstalledError,
    SkillNotInstalledError,
    SkillsError,
    classify_error,
)
from .registry import SKILL_FILE, Skill, SkillRegistry
from .registry.types import safe_relative_path, safe_segment

logger = logging.getLogger(__name__)

TARGET_DIR = ".claude/skills"
LEGACY_SUFFIX = ".md"
STAGING_PREFIX = ".staging-"


@dataclass
class InstallReport:
    """批量安装结果"""

    installed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[SkillsError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def merge(self, other: "InstallReport") -> "InstallReport":
        self.installed.extend(other.installed)
        self.skipped.extend(other.skipped)
        self.failed.extend(other.failed)
        return self


class Installer:
    """
    技能安装器

    支持:
    - 按名称安装（name 或 stack/name）
    - 按技术栈批量安装
    - 全量安装
    - 删除、列出、检查已安装技能
    - 更新已安装技能
    """

    def __init__(
        self,
        registry: SkillRegistry,
        base_dir: Path,
        target_dir: str = TARGET_DIR,
    ):
        self.registry = registry
        self.base_dir = Path(base_dir)
        self.target_path = self.base_dir / target_dir

    def skill_dir(self, name: str) -> Path:
        """
        技能安装目录

        Raises:
            InstallError: 名称不是单个路径段，或目录不在目标目录下
        """
        try:
            safe_segment(name)
        except RegistryParseError as e:
            raise InstallError(f"invalid skill name: {name!r}") from e

        path = self.target_path / name
        if path.resolve().parent != self.target_path.resolve():
            raise InstallError(f"invalid skill name: {name!r}")
        return path

    def _legacy_file(self, name: str) -> Path:
        return self.target_path / f"{name}{LEGACY_SUFFIX}"

    @staticmethod
    def _local_name(name: str) -> str:
        """stack/name -> name"""
        return name.rsplit("/", 1)[-1]

    def install(self, name: str, force: bool = False) -> Skill:
        """
        安装单个技能

        文件先写入目标目录下的临时目录，全部成功后才替换已安装的版本。

        Args:
            name: 技能名或 stack/name
            force: 已安装时覆盖

        Returns:
            安装的技能

        Raises:
            SkillNotFoundError: 注册表中不存在
            SkillAlreadyInstalledError: 已安装且 force=False
            RegistryFetchError: 获取内容失败
            RegistryParseError: 附加文件路径不安全
            InstallError: 名称不合法或写入失败
        """
        skill = self.registry.find(name)
        target = self.skill_dir(skill.name)

        if self.is_installed(skill.name) and not force:
            raise SkillAlreadyInstalledError(skill.name)

        files = self.registry.get_files(skill)
        checked = {safe_relative_path(rel): content for rel, content in files.items()}

        staging: Path | None = None
        try:
            self.target_path.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=self.target_path))
            # mkdtemp 创建的目录权限为 0700
            staging.chmod(0o755)
            for rel, content in checked.items():
                dest = staging.joinpath(*rel.parts)
                dest.parent.mkdir(parents=True, exist_ok=True)
                dest.write_bytes(content)

            if target.exists():
                shutil.rmtree(target)
            self._legacy_file(skill.name).unlink(missing_ok=True)
            os.replace(staging, target)
        except OSError as e:
            raise InstallError(f"failed to write skill {skill.name}: {e}") from e
        finally:
            if staging is not None and staging.exists():
                shutil.rmtree(staging, ignore_errors=True)

        logger.info(f"Installed skill {skill.full_name} -> {target} ({len(checked)} file(s))")
        return skill

    def _install_each(self, names: list[str], force: bool) -> InstallReport:
        report = InstallReport()
        for name in names:
            try:
                skill = self.install(name, force=force)
            except SkillAlreadyInstalledError as e:
                report.skipped.append(e.name)
            except Exception as e:
                err = classify_error(e)
                logger.error(f"Failed to install {name}: {err.message}")
                report.failed.append(err)
            else:
                report.installed.append(skill.name)
        return report

    def install_multiple(self, names: list[str], force: bool = False) -> InstallReport:
        """安装多个技能，单个失败不影响其他技能"""
        return self._install_each(names, force)

    def install_stack(self, stack: str, force: bool = False) -> InstallReport:
        """安装某个技术栈下的全部技能"""
        skills = self.registry.list_by_stack(stack)
        if not skills:
            return InstallReport(failed=[SkillsError(f"no skills found in stack: {stack}")])
        return self._install_each([s.full_name for s in skills], force)

    def install_all(self, force: bool = False) -> InstallReport:
        """安装注册表中的全部技能"""
        return self._install_each([s.full_name for s in self.registry.list()], force)

    def remove(self, name: str) -> None:
        """
        删除已安装的技能

        Raises:
            SkillNotInstalledError: 未安装
            InstallError: 名称不合法或删除失败
        """
        local_name = self._local_name(name)
        target = self.skill_dir(local_name)
        legacy = self._legacy_file(local_name)

        if not target.is_dir() and not legacy.is_file():
            raise SkillNotInstalledError(name)

        try:
            if target.is_dir():
                shutil.rmtree(target)
            if legacy.is_file():
                legacy.unlink()
        except OSError as e:
            raise InstallError(f"failed to remove skill {local_name}: {e}") from e

        logger.info(f"Removed skill {local_name}")

    def list_installed(self) -> list[str]:
        """
        列出已安装技能

        Returns:
            技能名（排序），目标目录不存在时为空列表
        """
        if not self.target_path.is_dir():
            return []

        installed: set[str] = set()
        for entry in self.target_path.iterdir():
            # 跳过隐藏项（包括中断安装残留的临时目录）
            if entry.name.startswith("."):
                continue
            if entry.is_dir() and (entry / SKILL_FILE).is_file():
                installed.add(entry.name)
            elif entry.is_file() and entry.suffix == LEGACY_SUFFIX:
                installed.add(entry.stem)
        return sorted(installed)

    def is_installed(self, name: str) -> bool:
        try:
            target = self.skill_dir(self._local_name(name))
        except InstallError:
            return False
        return (target / SKILL_FILE).is_file() or self._legacy_file(target.name).is_file()

    def update_installed(self) -> InstallReport:
        """
        用注册表中的最新内容覆盖已安装技能

        注册表中不存在的技能记为 skipped。
        """
        known = {s.name for s in self.registry.list()}
        report = InstallReport()
        to_update: list[str] = []
        for name in self.list_installed():
            if name in known:
                to_update.append(name)
            else:
                logger.warning(f"Installed skill {name} is not in the registry, skipping")
                report.skipped.append(name)
        return report.merge(self._install_each(to_update, force=True))
