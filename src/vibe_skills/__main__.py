"""
vibe-skills 包入口点 - 支持 `python -m vibe_skills` 调用
"""

import vibe_skills._ensure_utf8  # noqa: F401

from vibe_skills.main import app

if __name__ == "__main__":
    app()
