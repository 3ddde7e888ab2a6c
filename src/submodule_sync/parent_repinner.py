"""
Record updated submodule pointers in the parent repository.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from .git_manager import GitManager
from .models import DEFAULT_REMOTE, GitRepositoryError, RepinResult, RepinStatus
from .prompt_interface import NoOpPrompt, SyncPrompt


logger = logging.getLogger(__name__)

PARENT_LABEL = "main repository"


def changed_submodule_paths(short_status: str, submodule_paths: Sequence[str]) -> List[str]:
    """Return the configured paths that appear in `git status -s` output.

    A status entry matches a path when its path column is that path or lies
    beneath it. Order follows `submodule_paths`.
    """
    entries: List[str] = []
    for line in short_status.splitlines():
        # "XY path"; renames show "old -> new"
        parts = line.strip().split(None, 1)
        if len(parts) != 2:
            continue
        entry = parts[1].split(" -> ")[-1].strip().strip('"').rstrip("/")
        if entry:
            entries.append(entry)

    changed = []
    for path in submodule_paths:
        if any(e == path or e.startswith(path + "/") for e in entries):
            changed.append(path)
    return changed


class ParentRepinner:
    """Commits (and optionally pushes) the parent repository's submodule pointer updates."""

    def __init__(
        self, git_manager: GitManager, prompt: SyncPrompt = None, remote_name: str = DEFAULT_REMOTE
    ) -> None:
        self.gm = git_manager
        self.prompt = prompt or NoOpPrompt()
        self.remote_name = remote_name

    def repin(self, submodule_paths: Sequence[str]) -> RepinResult:
        """
        Stage the changed submodule entries, commit them, and push if the operator agrees.

        A failed push leaves the local commit in place.
        """
        self.prompt.show_message(
            "\n[3] Updating main repository to track new submodule commits...",
            style="bold green",
        )
        try:
            status = self.gm.get_short_status()
        except GitRepositoryError as e:
            self.prompt.show_message(
                f"Could not read status of the {PARENT_LABEL}: {e}", style="bold red"
            )
            return RepinResult(status=RepinStatus.STATUS_FAILED, error=str(e))

        changed = changed_submodule_paths(status, submodule_paths)
        if not changed:
            logger.info("Parent status mentions no configured submodule; nothing to re-pin")
            self.prompt.show_message(
                f"No submodule reference changes to commit in the {PARENT_LABEL}.",
                style="green",
            )
            return RepinResult(status=RepinStatus.NOTHING_TO_REPIN)

        message = self.prompt.ask_commit_message(PARENT_LABEL)
        if not message or not message.strip():
            logger.info("Parent re-pin aborted by operator")
            self.prompt.show_message(
                f"Update aborted. Submodule references in {PARENT_LABEL} not updated.",
                style="yellow",
            )
            return RepinResult(status=RepinStatus.ABORTED)

        try:
            self.gm.add_paths(changed)
            self.gm.commit(message.strip())
        except GitRepositoryError as e:
            self.prompt.show_message(
                "Error committing submodule reference updates!", style="bold red"
            )
            return RepinResult(status=RepinStatus.COMMIT_FAILED, staged_paths=changed, error=str(e))

        try:
            branch = self.gm.get_current_branch()
        except GitRepositoryError as e:
            self.prompt.show_message(
                f"Committed, but could not determine the current branch: {e}", style="bold red"
            )
            return RepinResult(status=RepinStatus.PUSH_FAILED, staged_paths=changed, error=str(e))

        if not self.prompt.confirm_push(PARENT_LABEL, self.remote_name, branch):
            self.prompt.show_message(
                "Submodule references committed locally (not pushed).", style="green"
            )
            return RepinResult(status=RepinStatus.COMMITTED, staged_paths=changed)

        try:
            self.gm.push(self.remote_name, branch)
        except GitRepositoryError as e:
            self.prompt.show_message("Error pushing changes to remote!", style="bold red")
            return RepinResult(status=RepinStatus.PUSH_FAILED, staged_paths=changed, error=str(e))

        self.prompt.show_message("Successfully pushed changes to remote!", style="bold green")
        return RepinResult(status=RepinStatus.PUSHED, staged_paths=changed)
