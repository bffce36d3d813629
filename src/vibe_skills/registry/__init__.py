"""
技能注册表

两种实现共享 SkillRegistry 接口:
- EmbeddedRegistry: 随包分发的内置技能
- RemoteRegistry: GitHub 上的 registry.json 索引（带磁盘缓存）
"""

from typing import get_args

from ..config import RegistrySource, Settings, resolve_ref
from ..errors import ConfigError
from .base import SKILL_FILE, SkillRegistry
from .cache import IndexCache
from .embedded import EmbeddedRegistry, builtin_skills_root, extract_description
from .remote import RemoteRegistry
from .types import RegistryIndex, Skill

SOURCES: tuple[str, ...] = get_args(RegistrySource)


def create_registry(
    cfg: Settings,
    *,
    source: str | None = None,
    branch: str | None = None,
    ref: str | None = None,
    no_cache: bool = False,
) -> SkillRegistry:
    """
    根据配置和命令行参数创建注册表

    Args:
        cfg: 配置
        source: remote | embedded（None 使用配置 registry_source）
        branch: --branch
        ref: --ref
        no_cache: 跳过缓存读取

    Raises:
        ConfigError: 未知来源
    """
    source = source or cfg.registry_source
    if source not in SOURCES:
        raise ConfigError(f"unknown registry source: {source} (expected one of {', '.join(SOURCES)})")

    if source == "embedded":
        root = cfg.embedded_skills_dir or None
        return EmbeddedRegistry(root)

    return RemoteRegistry(
        owner=cfg.registry_owner,
        repo=cfg.registry_repo,
        ref=resolve_ref(branch, ref, cfg),
        base_url=cfg.registry_base_url,
        cache=IndexCache(cfg.cache_dir, cfg.cache_ttl_seconds),
        no_cache=no_cache,
        timeout=cfg.http_timeout,
    )


__all__ = [
    "SKILL_FILE",
    "SOURCES",
    "Skill",
    "RegistryIndex",
    "SkillRegistry",
    "EmbeddedRegistry",
    "RemoteRegistry",
    "IndexCache",
    "builtin_skills_root",
    "extract_description",
    "create_registry",
]
