"""
vibe-skills CLI 入口

使用 Typer 和 Rich 提供命令行界面:
- list / search: 浏览注册表
- install / remove / update: 管理项目中已安装的技能
- cache clear: 清除注册表索引缓存
"""

import vibe_skills._ensure_utf8  # noqa: F401  # isort: skip

import logging
from dataclasses import dataclass, field

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import Settings, load_settings
from .errors import SkillsError
from .installer import Installer, InstallReport
from .logging import setup_logging
from .registry import SOURCES, IndexCache, RemoteRegistry, Skill, SkillRegistry, create_registry

logger = logging.getLogger(__name__)

# Typer 应用
app = typer.Typer(
    name="vibe-skills",
    help=(
        "Vibe Skills - install and manage AI coding assistant skills organized by "
        "technology stack. Skills are installed to .claude/skills/ in your project."
    ),
    add_completion=False,
    no_args_is_help=True,
)
cache_app = typer.Typer(help="Manage the local registry index cache", no_args_is_help=True)
app.add_typer(cache_app, name="cache")

# Rich 控制台
console = Console()


@dataclass
class CliState:
    """一次命令调用共享的状态（配置 + 懒加载的注册表）"""

    settings: Settings
    source: str | None = None
    branch: str | None = None
    ref: str | None = None
    no_cache: bool = False
    _registry: SkillRegistry | None = field(default=None, repr=False)

    @property
    def registry(self) -> SkillRegistry:
        if self._registry is None:
            self._registry = create_registry(
                self.settings,
                source=self.source,
                branch=self.branch,
                ref=self.ref,
                no_cache=self.no_cache,
            )
            logger.debug(f"Using registry {self._registry!r}")
        return self._registry

    def installer(self) -> Installer:
        return Installer(self.registry, self.settings.project_root, self.settings.target_dir)

    def close(self) -> None:
        if isinstance(self._registry, RemoteRegistry):
            self._registry.close()


def _state(ctx: typer.Context) -> CliState:
    return ctx.find_root().obj


def _fail(error: SkillsError) -> None:
    """输出错误并以状态码 1 退出"""
    console.print(f"[red]Error:[/red] {escape(error.message)}", highlight=False)
    if error.hint:
        console.print(f"[dim]Hint: {error.hint}[/dim]", highlight=False)
    raise typer.Exit(1)


def _installed_tag(installer: Installer, skill: Skill) -> str:
    return " [green](installed)[/green]" if installer.is_installed(skill.name) else ""


def _print_report(report: InstallReport, done: str, action: str) -> None:
    """打印批量操作结果，存在失败时以状态码 1 退出"""
    if report.installed:
        console.print(f"{done} {len(report.installed)} skill(s):")
        for name in report.installed:
            console.print(f"  [green]✓[/green] {name}", highlight=False)

    if report.skipped:
        console.print(f"\nSkipped {len(report.skipped)} skill(s):")
        for name in report.skipped:
            console.print(f"  [yellow]-[/yellow] {name}", highlight=False)

    if report.failed:
        console.print(f"\nFailed to {action} {len(report.failed)} skill(s):")
        for err in report.failed:
            console.print(f"  [red]✗[/red] {escape(err.message)}", highlight=False)
        raise typer.Exit(1)

    if not report.installed and not report.skipped:
        console.print("No skills to process.")


def _version_callback(value: bool) -> None:
    if value:
        from . import get_version_string

        console.print(f"vibe-skills {get_version_string()}", highlight=False)
        raise typer.Exit(0)


@app.callback()
def main(
    ctx: typer.Context,
    branch: str | None = typer.Option(
        None, "--branch", help="Use skills from specific branch (e.g., develop)"
    ),
    ref: str | None = typer.Option(
        None, "--ref", help="Use skills from specific ref (branch, tag, or commit)"
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Skip cache and fetch fresh from registry"
    ),
    source: str | None = typer.Option(
        None, "--source", help=f"Skill source: {' | '.join(SOURCES)} (default: remote)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Show debug logs"),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Vibe Skills - community-driven skills for AI coding assistants.
    """
    if source is not None and source not in SOURCES:
        raise typer.BadParameter(f"must be one of: {', '.join(SOURCES)}", param_hint="--source")

    try:
        cfg = load_settings()
    except SkillsError as e:
        _fail(e)
        return
    setup_logging(
        log_dir=cfg.log_dir_path,
        log_level="DEBUG" if verbose else cfg.log_level,
        log_format=cfg.log_format,
        log_file_prefix=cfg.log_file_prefix,
        log_max_size_mb=cfg.log_max_size_mb,
        log_backup_count=cfg.log_backup_count,
        log_to_console=cfg.log_to_console,
        log_to_file=cfg.log_to_file,
    )

    state = CliState(settings=cfg, source=source, branch=branch, ref=ref, no_cache=no_cache)
    ctx.obj = state
    ctx.call_on_close(state.close)


def list_skills(
    ctx: typer.Context,
    stack: str | None = typer.Option(None, "--stack", "-s", help="Filter by stack"),
    installed: bool = typer.Option(False, "--installed", "-i", help="List installed skills only"),
):
    """
    List available skills, grouped by stack.

    示例:
        vibe-skills list
        vibe-skills list --stack dotnet
        vibe-skills list --installed
    """
    state = _state(ctx)
    try:
        installer = state.installer()

        if installed:
            names = installer.list_installed()
            if not names:
                console.print("No skills installed in this project.")
                return
            console.print(f"Installed skills ({len(names)}):")
            for name in names:
                console.print(f"  {name}", highlight=False)
            return

        registry = state.registry
        if stack:
            skills = registry.list_by_stack(stack)
            if not skills:
                console.print(f"No skills found in stack: {stack}", highlight=False)
                console.print("\nAvailable stacks:")
                for name in registry.get_stacks():
                    console.print(f"  {name}", highlight=False)
                return
        else:
            skills = registry.list()

        if not skills:
            console.print("No skills available.")
            return

        grouped: dict[str, list[Skill]] = {}
        for skill in skills:
            grouped.setdefault(skill.stack, []).append(skill)

        for stack_name in sorted(grouped):
            table = Table(title=stack_name.upper(), title_justify="left", show_header=False, box=None)
            table.add_column("Skill", style="cyan", no_wrap=True)
            table.add_column("Description")
            for skill in sorted(grouped[stack_name], key=lambda s: s.name):
                table.add_row(
                    escape(skill.name),
                    f"{escape(skill.description)}{_installed_tag(installer, skill)}",
                )
            console.print(table)
            console.print()
    except SkillsError as e:
        _fail(e)


app.command("list")(list_skills)
app.command("ls", hidden=True)(list_skills)


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Text to match against name, description and stack"),
):
    """
    Search for skills by name, description or stack.

    示例:
        vibe-skills search database
        vibe-skills search "code review"
    """
    state = _state(ctx)
    try:
        installer = state.installer()
        results = state.registry.search(query)
    except SkillsError as e:
        _fail(e)
        return

    if not results:
        console.print(f"No skills found matching: {escape(query)}", highlight=False)
        return

    console.print(f"Found {len(results)} skill(s) matching '{escape(query)}':\n", highlight=False)
    for skill in results:
        tag = _installed_tag(installer, skill)
        console.print(f"  [cyan]{escape(skill.full_name)}[/cyan]{tag}", highlight=False)
        if skill.description:
            console.print(f"    {escape(skill.description)}", highlight=False)
        console.print()


@app.command()
def install(
    ctx: typer.Context,
    skills: list[str] | None = typer.Argument(None, help="Skill names (name or stack/name)"),
    stack: str | None = typer.Option(
        None, "--stack", "-s", help="Install all skills from specified stack(s), comma-separated"
    ),
    all_skills: bool = typer.Option(False, "--all", "-a", help="Install all available skills"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing skills"),
):
    """
    Install skills to the current project (.claude/skills/).

    示例:
        vibe-skills install commit-convention
        vibe-skills install ef-core sql-optimization
        vibe-skills install --stack dotnet,common
        vibe-skills install --all
        vibe-skills install            # 安装 VIBE_SKILLS_SKILLS 中配置的技能
    """
    state = _state(ctx)
    try:
        installer = state.installer()

        if all_skills:
            report = installer.install_all(force=force)
        elif stack:
            report = InstallReport()
            for stack_name in (s.strip() for s in stack.split(",")):
                if stack_name:
                    report.merge(installer.install_stack(stack_name, force=force))
        elif skills:
            report = installer.install_multiple(skills, force=force)
        elif state.settings.skills:
            report = installer.install_multiple(state.settings.skills, force=force)
        else:
            console.print("[red]Error:[/red] no skills specified.")
            console.print(
                "Specify skill names, --stack or --all, "
                "or set VIBE_SKILLS_SKILLS (e.g. in .env) to a JSON list of skills."
            )
            raise typer.Exit(1)
    except SkillsError as e:
        _fail(e)
        return

    _print_report(report, "Installed", "install")


def remove(
    ctx: typer.Context,
    skills: list[str] = typer.Argument(..., help="Installed skill names"),
):
    """
    Remove installed skills from the current project.

    示例:
        vibe-skills remove commit-convention
        vibe-skills rm ef-core sql-optimization
    """
    report = InstallReport()
    try:
        installer = _state(ctx).installer()
    except SkillsError as e:
        _fail(e)
        return

    for name in skills:
        try:
            installer.remove(name)
        except SkillsError as e:
            report.failed.append(e)
        else:
            report.installed.append(name)

    _print_report(report, "Removed", "remove")


app.command("remove")(remove)
app.command("rm", hidden=True)(remove)
app.command("uninstall", hidden=True)(remove)


@app.command()
def update(ctx: typer.Context):
    """
    Refresh the registry index and reinstall every installed skill.
    """
    state = _state(ctx)
    try:
        registry = state.registry
        if isinstance(registry, RemoteRegistry):
            registry.clear_cache()
        installer = state.installer()
        if not installer.list_installed():
            console.print("No skills installed in this project.")
            return
        report = installer.update_installed()
    except SkillsError as e:
        _fail(e)
        return

    _print_report(report, "Updated", "update")


@cache_app.command("clear")
def cache_clear(
    ctx: typer.Context,
    all_refs: bool = typer.Option(False, "--all", help="Clear cached indexes of every ref"),
):
    """
    Clear the cached registry index (current ref by default).
    """
    state = _state(ctx)
    cfg = state.settings

    if all_refs:
        removed = IndexCache(cfg.cache_dir, cfg.cache_ttl_seconds).clear()
        console.print(f"Cleared {removed} cached index(es).")
        return

    try:
        registry = state.registry
    except SkillsError as e:
        _fail(e)
        return

    if not isinstance(registry, RemoteRegistry):
        console.print("The embedded registry has no cache.")
        return

    if registry.clear_cache():
        console.print(f"Cleared cache for ref {registry.ref}.", highlight=False)
    else:
        console.print(f"No cache for ref {registry.ref}.", highlight=False)


@app.command()
def version():
    """Print version information."""
    from . import get_version_string

    console.print(f"vibe-skills {get_version_string()}", highlight=False)


if __name__ == "__main__":
    app()
