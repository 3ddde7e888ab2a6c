"""
Shared fixtures: a scripted operator and mock-backed submodule references.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union
from unittest.mock import MagicMock

import pytest

from submodule_sync.models import SubmoduleRef
from submodule_sync.prompt_interface import SyncPrompt


class ScriptedPrompt(SyncPrompt):
    """Answers prompts from a script and records everything it was asked."""

    def __init__(
        self,
        reconcile: Union[bool, Dict[str, bool]] = True,
        messages: Optional[List[str]] = None,
        push: bool = True,
    ) -> None:
        self.reconcile = reconcile
        self.messages = list(messages or [])
        self.push = push
        self.shown: List[str] = []
        self.changes_shown: List[str] = []
        self.reconcile_asked: List[str] = []
        self.message_asked: List[str] = []
        self.push_asked: List[str] = []

    def show_message(self, message: str, style: str = "") -> None:
        self.shown.append(message)

    def show_changes(self, label: str, status_text: str) -> None:
        self.changes_shown.append(label)

    def confirm_reconcile(self, submodule_path: str) -> bool:
        self.reconcile_asked.append(submodule_path)
        if isinstance(self.reconcile, dict):
            return self.reconcile.get(submodule_path, False)
        return self.reconcile

    def ask_commit_message(self, label: str) -> str:
        self.message_asked.append(label)
        return self.messages.pop(0) if self.messages else ""

    def confirm_push(self, label: str, remote_name: str, branch_name: str) -> bool:
        self.push_asked.append(f"{label}:{remote_name}/{branch_name}")
        return self.push

    def saw(self, fragment: str) -> bool:
        return any(fragment in m for m in self.shown)


def make_git_manager(status: str = "", unpushed: Optional[List[str]] = None, branch: str = "main") -> MagicMock:
    """A GitManager stand-in with canned query answers."""
    gm = MagicMock()
    gm.get_short_status.return_value = status
    gm.get_status.return_value = f"On branch {branch}\n{status}"
    gm.get_unpushed_commits.return_value = list(unpushed or [])
    gm.get_current_branch.return_value = branch
    return gm


@pytest.fixture(autouse=True)
def isolated_log(tmp_path: Path, monkeypatch):
    """Keep CLI log files out of the real home directory."""
    monkeypatch.setenv("SUBMODULE_SYNC_LOG", str(tmp_path / "logs" / "submodule-sync.log"))


@pytest.fixture()
def workdir(tmp_path: Path, monkeypatch) -> Path:
    """A parent directory with submodule folders `a` and `b`; cwd is set to it."""
    root = tmp_path / "parent"
    (root / "a").mkdir(parents=True)
    (root / "b").mkdir(parents=True)
    monkeypatch.chdir(root)
    return root


@pytest.fixture()
def make_submodule(workdir: Path):
    def factory(path: str, **kwargs) -> SubmoduleRef:
        return SubmoduleRef(path=path, abs_path=workdir / path, git_manager=make_git_manager(**kwargs))

    return factory
