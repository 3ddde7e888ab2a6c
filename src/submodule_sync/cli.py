"""
Command-line interface for the Git submodule sync tool.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .sync_orchestrator import SyncOrchestrator
from .cli_prompt import CliPrompt
from .models import (
    DEFAULT_INTEGRATION_BRANCH,
    DEFAULT_REMOTE,
    ReconcileStatus,
    RepinStatus,
    SubmoduleReport,
    SyncConfig,
    SyncError,
    SyncOutcome,
)
from . import __version__ as PACKAGE_VERSION


console = Console()
logger = logging.getLogger(__name__)

LOG_ENV_VAR = "SUBMODULE_SYNC_LOG"

STATUS_LABELS = {
    ReconcileStatus.CLEAN: "✅ Clean",
    ReconcileStatus.DIVERGENT: "⚠️  Divergent",
    ReconcileStatus.DECLINED: "⏭️  Skipped",
    ReconcileStatus.ABORTED: "🚫 Aborted by operator",
    ReconcileStatus.FAILED: "❌ Failed",
    ReconcileStatus.RECONCILED: "🚀 Pushed",
    ReconcileStatus.DETECTION_FAILED: "❌ Could not inspect",
}

REPIN_LABELS = {
    RepinStatus.NOT_RUN: "not needed (no submodule pushed)",
    RepinStatus.NOTHING_TO_REPIN: "nothing to re-pin",
    RepinStatus.STATUS_FAILED: "could not read status",
    RepinStatus.ABORTED: "aborted by operator",
    RepinStatus.COMMIT_FAILED: "commit failed",
    RepinStatus.COMMITTED: "committed locally",
    RepinStatus.PUSHED: "committed and pushed",
    RepinStatus.PUSH_FAILED: "committed, push failed",
}


def _print_version(ctx, param, value):
    """Eager option callback to print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"submodule-sync {PACKAGE_VERSION}")
    ctx.exit()


def _default_log_path() -> Path:
    """Determine default log file path (~/.submodule-sync/submodule-sync.log)."""
    env_path = os.environ.get(LOG_ENV_VAR)
    if env_path:
        p = Path(env_path).expanduser()
        p.parent.mkdir(parents=True, exist_ok=True)
        return p
    base = Path.home() / ".submodule-sync"
    base.mkdir(parents=True, exist_ok=True)
    return base / "submodule-sync.log"


def setup_logging(verbose: bool = False, console_level: Optional[str] = None, log_file: Optional[Path] = None) -> Path:
    """Log everything to a rotating file; mirror to the console only when asked.

    Returns the log file path.
    """
    log_path = Path(log_file) if log_file else _default_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    # Clear existing handlers to avoid duplication in tests / repeated invocations
    root.handlers.clear()
    root.setLevel(logging.DEBUG)

    file_handler = RotatingFileHandler(
        str(log_path), maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(file_handler)

    if verbose or console_level:
        level_map = {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warning": logging.WARNING,
            "error": logging.ERROR,
        }
        console_handler = RichHandler(console=console, rich_tracebacks=True)
        console_handler.setLevel(level_map.get((console_level or "info").lower(), logging.INFO))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(console_handler)

    return log_path


def _maybe_print_log_notice(verbose: bool, console_level: Optional[str], log_path: Path) -> None:
    """Inform user about logging destination and how to enable console logs."""
    if verbose or console_level:
        return
    console.print(f"[dim]Logs are written to {log_path}. Use -v or --log-level to see them here.[/dim]")


def _banner(title: str) -> None:
    console.print(Panel(title, border_style="cyan", expand=False))


@click.group()
@click.option(
    "--version",
    "-V",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose console logging (INFO)")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Console log level. By default, console logging is disabled.",
)
@click.option(
    "--repo-path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to the parent repository (defaults to current directory)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, log_level: Optional[str], repo_path: Optional[Path]) -> None:
    """Git Submodule Sync - pull, push and re-pin the submodules of a repository."""
    log_path = setup_logging(verbose, console_level=log_level)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["console_level"] = log_level
    ctx.obj["log_path"] = log_path
    ctx.obj["repo_path"] = repo_path.resolve() if isinstance(repo_path, Path) else None
    logger.debug(f"CLI init: cwd={Path.cwd()} repo_path={ctx.obj['repo_path']}")


submodule_option = click.option(
    "--submodule",
    "-s",
    "submodules",
    multiple=True,
    help="Submodule path to manage (repeatable, processed in order). Defaults to every submodule in .gitmodules.",
)


@cli.command()
@submodule_option
@click.option(
    "--branch",
    "-b",
    default=DEFAULT_INTEGRATION_BRANCH,
    show_default=True,
    help="Integration branch checked out and pulled in every submodule",
)
@click.option(
    "--remote",
    "remote_name",
    default=DEFAULT_REMOTE,
    show_default=True,
    help="Remote that submodule and parent branches are pushed to",
)
@click.pass_context
def sync(ctx: click.Context, submodules: Tuple[str, ...], branch: str, remote_name: str) -> None:
    """
    Pull every submodule, push local divergence, and re-pin the parent repository.

    Example: submodule-sync sync -s server -s ui
    """
    try:
        _maybe_print_log_notice(ctx.obj.get("verbose"), ctx.obj.get("console_level"), ctx.obj.get("log_path"))
        _banner("GIT SUBMODULE AUTO-SYNC")

        config = SyncConfig(
            submodule_paths=tuple(submodules),
            integration_branch=branch,
            remote_name=remote_name,
        )
        orchestrator = SyncOrchestrator(config, CliPrompt(console), ctx.obj.get("repo_path"))
        outcome = orchestrator.run()

        if outcome.reports:
            _display_reports(outcome.reports, title="📋 **Sync Summary**")
        _display_repin(outcome)
        _banner("SYNC COMPLETED" if outcome.exit_code == 0 else "SYNC ABORTED")
        sys.exit(outcome.exit_code)

    except SyncError as e:
        console.print(f"\n❌ **Sync Error:** {e}", style="bold red")
        logger.debug("Sync aborted due to SyncError", exc_info=True)
        sys.exit(1)
    except (click.Abort, KeyboardInterrupt):
        console.print("\n\n🚫 **Operation cancelled by user**", style="bold yellow")
        logger.debug("Operation cancelled by user", exc_info=True)
        sys.exit(130)
    except Exception as e:
        console.print(f"\n💥 **Unexpected Error:** {e}", style="bold red")
        if ctx.obj.get("verbose"):
            console.print_exception()
        logger.debug("Unexpected error during sync", exc_info=True)
        sys.exit(1)


@cli.command()
@submodule_option
@click.pass_context
def status(ctx: click.Context, submodules: Tuple[str, ...]) -> None:
    """Show divergence of each submodule without pulling or pushing anything."""
    try:
        _maybe_print_log_notice(ctx.obj.get("verbose"), ctx.obj.get("console_level"), ctx.obj.get("log_path"))
        orchestrator = SyncOrchestrator(
            SyncConfig(submodule_paths=tuple(submodules)), root_path=ctx.obj.get("repo_path")
        )
        _display_reports(orchestrator.collect_status(), title="📊 **Submodule Status**")
    except Exception as e:
        console.print(f"\n❌ **Error getting status:** {e}", style="bold red")
        logger.debug("Error in status command", exc_info=True)
        sys.exit(1)


@cli.command()
def version() -> None:
    """Print the current submodule-sync version."""
    console.print(f"submodule-sync {PACKAGE_VERSION}")


def _flag(value: Optional[bool]) -> str:
    if value is None:
        return "?"
    return "yes" if value else "no"


def _display_reports(reports: List[SubmoduleReport], title: str) -> None:
    """Display one row per submodule with its divergence flags and result."""
    console.print(f"\n{title}")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Submodule", style="cyan")
    table.add_column("Uncommitted", justify="center", style="yellow")
    table.add_column("Unpushed", justify="center", style="yellow")
    table.add_column("Result", style="blue")

    for report in reports:
        div = report.divergence
        table.add_row(
            report.path,
            _flag(div.has_uncommitted_changes if div else None),
            _flag(div.has_unpushed_commits if div else None),
            STATUS_LABELS.get(report.status, report.status.value),
        )

    console.print(table)

    for report in reports:
        if report.error:
            console.print(f"  {report.path}: {report.error}", style="red", markup=False)


def _display_repin(outcome: SyncOutcome) -> None:
    if outcome.update is None or not outcome.update.success:
        return
    repin = outcome.repin
    style = "bold green" if repin.success else "bold red"
    line = f"Main repository: {REPIN_LABELS[repin.status]}"
    if repin.staged_paths:
        line += f" ({', '.join(repin.staged_paths)})"
    if repin.error:
        line += f": {repin.error}"
    console.print(line, style=style, markup=False)


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n\n🚫 **Operation cancelled by user**", style="bold yellow")
        logger.debug("Top-level cancellation (KeyboardInterrupt)", exc_info=True)
        sys.exit(130)
    except Exception as e:
        console.print(f"\n💥 **Unexpected error:** {e}", style="bold red")
        logger.debug("Unexpected error in main()", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
