"""
vibe-skills - AI 编码助手技能包管理器

从中央注册表获取按技术栈分组的技能（SKILL.md），安装到项目的 .claude/skills/ 目录。
"""


def _resolve_version_info() -> tuple[str, str]:
    """
    解析版本号和 git 短哈希。

    返回 (version, git_hash)。
    开发模式下优先读取源码根目录的 pyproject.toml，并从 git 获取当前 HEAD 短哈希。
    """
    from pathlib import Path

    version = "0.0.0-dev"
    git_hash = "unknown"

    # 1. 源码根目录的 pyproject.toml（editable 安装时始终最新）
    project_root = Path(__file__).parent.parent.parent
    pyproject_path = project_root / "pyproject.toml"
    if pyproject_path.exists():
        try:
            import tomllib
            with open(pyproject_path, "rb") as f:
                version = tomllib.load(f)["project"]["version"]
        except Exception:
            pass

    # 2. 回退到已安装包的元数据
    if version == "0.0.0-dev":
        try:
            from importlib.metadata import version as meta_version
            version = meta_version("vibe-skills")
        except Exception:
            pass

    # 仅在源码目录下从 git 获取哈希
    if (project_root / ".git").exists():
        try:
            import subprocess
            git_hash = subprocess.check_output(
                ["git", "-C", str(project_root), "rev-parse", "--short=7", "HEAD"],
                stderr=subprocess.DEVNULL, text=True
            ).strip()
        except Exception:
            git_hash = "dev"

    return version, git_hash


__version__, __git_hash__ = _resolve_version_info()

def get_version_string() -> str:
    """返回完整版本标识，如 '0.3.0+823f46b'"""
    return f"{__version__}+{__git_hash__}"
