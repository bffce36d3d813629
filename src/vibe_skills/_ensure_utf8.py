"""
UTF-8 编码强制模块 — 在 CLI 入口最早期导入

Windows 上 sys.stdout/stderr 默认使用 GBK 编码，
输出 ✓ / ✗ 等符号时会触发 UnicodeEncodeError。

用法: 在入口模块的最顶部添加:
    import vibe_skills._ensure_utf8  # noqa: F401
"""

import sys


def ensure_utf8_stdio() -> None:
    """将 stdout/stderr 重新配置为 UTF-8 编码。

    仅在流对象支持 reconfigure 时生效。
    errors="replace" 确保遇到无法编码的字符时用替代符号而非崩溃。
    """
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            try:
                stream.reconfigure(encoding="utf-8", errors="replace")
            except (OSError, ValueError):
                pass


if sys.platform == "win32":
    ensure_utf8_stdio()
