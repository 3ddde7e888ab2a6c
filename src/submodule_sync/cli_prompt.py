"""
CLI-specific implementation of the prompt interface.
"""

from __future__ import annotations

import click
from rich.console import Console
from rich.panel import Panel

from .prompt_interface import SyncPrompt


class CliPrompt(SyncPrompt):
    """CLI implementation of the prompt interface using click and rich."""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def show_message(self, message: str, style: str = "") -> None:
        self.console.print(message, style=style or None)

    def show_changes(self, label: str, status_text: str) -> None:
        """Show long-form status in a panel so it stands apart from progress lines."""
        panel = Panel(
            status_text.rstrip() or "(no status output)",
            title=f"Uncommitted changes in {label}",
            title_align="left",
            border_style="yellow",
        )
        self.console.print(panel)

    def confirm_reconcile(self, submodule_path: str) -> bool:
        return click.confirm(
            f"Do you want to commit and push changes in the {submodule_path} submodule?",
            default=False,
        )

    def ask_commit_message(self, label: str) -> str:
        """Prompt for a commit message; Ctrl-C or EOF count as an empty answer."""
        try:
            return click.prompt(
                f"Enter commit message for {label} (leave empty to abort)",
                default="",
                show_default=False,
            )
        except click.Abort:
            return ""

    def confirm_push(self, label: str, remote_name: str, branch_name: str) -> bool:
        return click.confirm(
            f"Push {label} to {remote_name}/{branch_name}?", default=False
        )
