"""
vibe-skills 配置模块

所有配置项可通过环境变量（前缀 VIBE_SKILLS_）或项目目录下的 .env 文件覆盖。
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from .errors import ConfigError

DEFAULT_OWNER = "cuongtl1992"
DEFAULT_REPO = "vibe-skills"
DEFAULT_BRANCH = "main"
RAW_GITHUB_URL = "https://raw.githubusercontent.com"

RegistrySource = Literal["remote", "embedded"]


class Settings(BaseSettings):
    """应用配置"""

    # === 注册表 ===
    registry_source: RegistrySource = Field(
        default="remote", description="技能来源: remote(GitHub 索引) | embedded(内置技能包)"
    )
    registry_owner: str = Field(default=DEFAULT_OWNER, description="注册表 GitHub owner")
    registry_repo: str = Field(default=DEFAULT_REPO, description="注册表 GitHub 仓库")
    registry_branch: str = Field(default="", description="注册表分支")
    registry_ref: str = Field(default="", description="注册表 ref（branch/tag/commit，优先于 branch）")
    registry_base_url: str = Field(default=RAW_GITHUB_URL, description="原始文件下载地址")
    embedded_skills_dir: str = Field(
        default="", description="内置技能包目录（留空使用随包分发的 builtin_skills）"
    )
    http_timeout: float = Field(default=30.0, description="HTTP 请求超时（秒）")

    # === 缓存 ===
    cache_dir: Path = Field(
        default_factory=lambda: Path.home() / ".vibe-skills" / "cache",
        description="注册表索引缓存目录",
    )
    cache_ttl_hours: float = Field(default=24.0, description="索引缓存有效期（小时，0=不读缓存）")

    # === 安装 ===
    project_root: Path = Field(
        default_factory=lambda: Path.cwd(), description="项目根目录 (默认为当前工作目录)"
    )
    target_dir: str = Field(default=".claude/skills", description="技能安装目录（相对项目根目录）")
    skills: list[str] = Field(
        default_factory=list, description="不带参数执行 install 时安装的技能列表"
    )

    # === 日志配置 ===
    log_level: str = Field(default="WARNING", description="控制台日志级别")
    log_dir: str = Field(default="", description="日志目录（留空则不写日志文件）")
    log_file_prefix: str = Field(default="vibe-skills", description="日志文件前缀")
    log_max_size_mb: int = Field(default=5, description="单个日志文件最大大小（MB）")
    log_backup_count: int = Field(default=3, description="保留的日志文件数量")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="日志格式"
    )
    log_to_console: bool = Field(default=True, description="是否输出到控制台")
    log_to_file: bool = Field(default=False, description="是否输出到文件")

    model_config = {
        "env_prefix": "VIBE_SKILLS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        # 忽略空字符串环境变量，避免 "" 被解析成 float/bool 导致启动失败
        "env_ignore_empty": True,
    }

    @property
    def install_path(self) -> Path:
        """技能安装目录完整路径"""
        return self.project_root / self.target_dir

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_hours * 3600

    @property
    def log_dir_path(self) -> Path | None:
        """日志目录完整路径"""
        if not self.log_dir:
            return None
        return Path(self.log_dir).expanduser()


def resolve_ref(
    flag_branch: str | None,
    flag_ref: str | None,
    cfg: Settings | None = None,
) -> str:
    """
    解析注册表 ref

    优先级: --ref > --branch > 配置 registry_ref > 配置 registry_branch > main
    """
    if flag_ref:
        return flag_ref
    if flag_branch:
        return flag_branch

    if cfg is not None:
        if cfg.registry_ref:
            return cfg.registry_ref
        if cfg.registry_branch:
            return cfg.registry_branch

    return DEFAULT_BRANCH


def load_settings() -> Settings:
    """
    读取当前环境（环境变量 + 当前目录 .env）下的配置

    Raises:
        ConfigError: 配置值不合法
    """
    try:
        return Settings()
    except ValidationError as e:
        problems = "; ".join(
            f"VIBE_SKILLS_{str(err['loc'][0]).upper()}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"invalid configuration: {problems}") from e
