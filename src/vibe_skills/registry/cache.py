"""
注册表索引缓存

每个 ref 一个 JSON 文件，超过 TTL 视为过期:

    ~/.vibe-skills/cache/registry-<ref>.json
    {"ref": "main", "fetched_at": 1735689600.0, "index": {...}}
"""

import json
import logging
import os
import re
import tempfile
import time
from pathlib import Path

from ..errors import RegistryParseError
from .types import RegistryIndex

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 3600

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class IndexCache:
    """
    基于文件的索引缓存

    写入采用临时文件 + 替换，读取时任何损坏都按未命中处理。
    """

    def __init__(self, cache_dir: Path, ttl_seconds: float = DEFAULT_TTL_SECONDS):
        self.cache_dir = Path(cache_dir)
        self.ttl_seconds = ttl_seconds

    def path_for(self, ref: str) -> Path:
        """ref 对应的缓存文件路径"""
        safe_ref = _UNSAFE_CHARS.sub("_", ref) or "_"
        return self.cache_dir / f"registry-{safe_ref}.json"

    def get(self, ref: str) -> RegistryIndex | None:
        """
        读取缓存

        Returns:
            未过期的索引，否则 None
        """
        if self.ttl_seconds <= 0:
            return None

        path = self.path_for(ref)
        if not path.exists():
            return None

        try:
            entry = json.loads(path.read_text(encoding="utf-8"))
            age = time.time() - float(entry["fetched_at"])
            # 时间戳在未来（时钟回拨）同样视为过期
            if age < 0 or age >= self.ttl_seconds:
                logger.debug(f"Cache expired for ref {ref} (age {age:.0f}s)")
                return None
            index = RegistryIndex.from_dict(entry["index"])
        except (OSError, ValueError, KeyError, TypeError, RegistryParseError) as e:
            logger.warning(f"Ignoring corrupt cache file {path}: {e}")
            return None

        logger.debug(f"Cache hit for ref {ref} ({len(index.skills)} skills)")
        return index

    def set(self, ref: str, index: RegistryIndex) -> Path:
        """写入缓存"""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(ref)
        payload = {
            "ref": ref,
            "fetched_at": time.time(),
            "index": index.to_dict(),
        }

        fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=".registry-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Cached registry index for ref {ref} at {path}")
        return path

    def clear_ref(self, ref: str) -> bool:
        """
        删除单个 ref 的缓存

        Returns:
            是否删除了文件
        """
        path = self.path_for(ref)
        if not path.exists():
            return False
        path.unlink()
        logger.info(f"Cleared cache for ref {ref}")
        return True

    def clear(self) -> int:
        """
        删除全部缓存

        Returns:
            删除的文件数
        """
        if not self.cache_dir.exists():
            return 0

        removed = 0
        for path in self.cache_dir.glob("registry-*.json"):
            path.unlink()
            removed += 1

        logger.info(f"Cleared {removed} cached registry index(es)")
        return removed
