"""
GitHub 远程技能注册表

从 raw.githubusercontent.com 获取 skills/registry.json 与技能文件:

    <base_url>/<owner>/<repo>/<ref>/skills/registry.json
    <base_url>/<owner>/<repo>/<ref>/skills/<skill.path>

索引按 ref 缓存到本地磁盘（见 cache.IndexCache）。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx

from ..config import DEFAULT_BRANCH, DEFAULT_OWNER, DEFAULT_REPO, RAW_GITHUB_URL
from ..errors import RegistryFetchError, RegistryParseError
from .base import SkillRegistry
from .cache import DEFAULT_TTL_SECONDS, IndexCache
from .types import RegistryIndex, Skill

logger = logging.getLogger(__name__)

INDEX_PATH = "skills/registry.json"
DEFAULT_CACHE_DIR = Path.home() / ".vibe-skills" / "cache"
DEFAULT_TIMEOUT = 30.0


class RemoteRegistry(SkillRegistry):
    """
    GitHub 技能注册表

    支持:
    - 指定 owner/repo/ref（ref 可以是分支、tag 或 commit，ref 优先于 branch）
    - 索引磁盘缓存（no_cache=True 时跳过读取，但仍写入新结果）
    - 注入 httpx.Client（便于测试和代理配置）
    """

    def __init__(
        self,
        owner: str = "",
        repo: str = "",
        branch: str = "",
        ref: str = "",
        *,
        base_url: str = RAW_GITHUB_URL,
        cache: IndexCache | None = None,
        no_cache: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        self.owner = owner or DEFAULT_OWNER
        self.repo = repo or DEFAULT_REPO
        self._ref = ref or branch or DEFAULT_BRANCH
        self.base_url = base_url.rstrip("/")
        self.cache = cache if cache is not None else IndexCache(DEFAULT_CACHE_DIR, DEFAULT_TTL_SECONDS)
        self.no_cache = no_cache
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._index: RegistryIndex | None = None

    @property
    def ref(self) -> str:
        """当前 ref（分支/tag/commit）"""
        return self._ref

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout, follow_redirects=True)
        return self._client

    def close(self) -> None:
        """关闭自行创建的 HTTP 客户端"""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> RemoteRegistry:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def list(self) -> list[Skill]:
        return list(self.fetch_index().skills)

    def get_content(self, skill: Skill) -> bytes:
        return self._fetch(self.build_raw_url(f"skills/{skill.path}"))

    def _get_file(self, skill: Skill, relative_path: str) -> bytes:
        return self._fetch(self.build_raw_url(f"skills/{skill.directory}/{relative_path}"))

    def fetch_index(self) -> RegistryIndex:
        """
        获取注册表索引

        顺序: 内存 -> 磁盘缓存（除非 no_cache）-> GitHub
        """
        if self._index is not None:
            return self._index

        if not self.no_cache:
            cached = self.cache.get(self._ref)
            if cached is not None:
                self._index = cached
                return cached

        url = self.build_raw_url(INDEX_PATH)
        logger.info(f"Fetching registry index from {url}")
        try:
            data = self._fetch(url)
        except RegistryFetchError as e:
            raise RegistryFetchError(f"failed to fetch registry: {e.message}", details=e.details) from e

        try:
            index = RegistryIndex.from_dict(json.loads(data))
        except (ValueError, UnicodeDecodeError) as e:
            raise RegistryParseError(f"failed to parse registry: {e}") from e
        except RegistryParseError as e:
            raise RegistryParseError(f"failed to parse registry: {e.message}", details=e.details) from e

        # 写缓存失败不影响本次结果
        try:
            self.cache.set(self._ref, index)
        except OSError as e:
            logger.warning(f"Failed to write registry cache: {e}")

        self._index = index
        return index

    def build_raw_url(self, path: str) -> str:
        """构建 raw 文件 URL"""
        return f"{self.base_url}/{self.owner}/{self.repo}/{self._ref}/{path.lstrip('/')}"

    def _fetch(self, url: str) -> bytes:
        """执行 HTTP GET"""
        try:
            resp = self.client.get(url)
        except httpx.HTTPError as e:
            raise RegistryFetchError(f"{url}: {e}", details={"url": url}) from e

        if resp.status_code == httpx.codes.NOT_FOUND:
            raise RegistryFetchError(f"not found: {url}", details={"url": url, "status": 404})

        if resp.status_code != httpx.codes.OK:
            raise RegistryFetchError(
                f"HTTP {resp.status_code}: {url}",
                details={"url": url, "status": resp.status_code},
            )

        return resp.content

    def clear_cache(self) -> bool:
        """清除当前 ref 的索引缓存"""
        self._index = None
        return self.cache.clear_ref(self._ref)

    def __repr__(self) -> str:
        return f"<RemoteRegistry {self.owner}/{self.repo}@{self._ref}>"
