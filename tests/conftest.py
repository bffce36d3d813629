"""测试共享 fixture: 临时技能包、模拟 GitHub raw 服务."""

import json
from pathlib import Path

import httpx
import pytest

from vibe_skills.registry import EmbeddedRegistry, IndexCache, RemoteRegistry

BASE_URL = "https://raw.example.test"
OWNER = "acme"
REPO = "skills"


def write_skill(
    root: Path,
    stack: str,
    name: str,
    content: str,
    extra: dict[str, str] | None = None,
) -> Path:
    skill_dir = root / stack / name
    skill_dir.mkdir(parents=True, exist_ok=True)
    (skill_dir / "SKILL.md").write_text(content, encoding="utf-8")
    for rel, text in (extra or {}).items():
        path = skill_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return skill_dir


@pytest.fixture
def skills_root(tmp_path):
    root = tmp_path / "bundle"
    write_skill(root, "common", "commit-convention", "# Commit\n\nConventional commit messages.\n")
    write_skill(
        root,
        "common",
        "code-reviewer",
        "---\nname: code-reviewer\ndescription: Review code for bugs\n---\n# Reviewer\n\nBody text.\n",
    )
    write_skill(
        root,
        "dotnet",
        "ef-core",
        "# EF Core\n\nEntity Framework Core database guidance.\n",
        extra={"templates/dbcontext.cs": "class AppDbContext {}\n"},
    )
    return root


@pytest.fixture
def embedded(skills_root):
    return EmbeddedRegistry(skills_root)


class FakeGitHub:
    """按 URL path 返回预置内容的 httpx MockTransport 处理器"""

    def __init__(self):
        self.files: dict[str, bytes] = {}
        self.requests: list[str] = []

    def add(self, path: str, content: bytes | str, ref: str = "main") -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.files[f"/{OWNER}/{REPO}/{ref}/{path}"] = content

    def add_tree(self, root: Path, ref: str = "main") -> None:
        """把本地技能目录和生成的 registry.json 发布到假服务器"""
        index = EmbeddedRegistry(root).to_index()
        self.add("skills/registry.json", json.dumps(index.to_dict()), ref=ref)
        for path in root.rglob("*"):
            if path.is_file():
                self.add(f"skills/{path.relative_to(root).as_posix()}", path.read_bytes(), ref=ref)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request.url.path)
        content = self.files.get(request.url.path)
        if content is None:
            return httpx.Response(404, text="404: Not Found")
        return httpx.Response(200, content=content)

    def index_requests(self) -> int:
        return sum(1 for p in self.requests if p.endswith("/skills/registry.json"))


@pytest.fixture
def github(skills_root):
    server = FakeGitHub()
    server.add_tree(skills_root)
    return server


@pytest.fixture
def cache(tmp_path):
    return IndexCache(tmp_path / "cache", ttl_seconds=3600)


@pytest.fixture
def make_remote(github, cache):
    clients: list[httpx.Client] = []

    def _make(handler=None, **kwargs) -> RemoteRegistry:
        client = httpx.Client(transport=httpx.MockTransport(handler or github))
        clients.append(client)
        kwargs.setdefault("cache", cache)
        return RemoteRegistry(OWNER, REPO, base_url=BASE_URL, client=client, **kwargs)

    yield _make

    for client in clients:
        client.close()
