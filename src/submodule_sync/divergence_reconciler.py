"""
Commit and push local divergence in a submodule.
"""

from __future__ import annotations

import logging
from typing import Optional

from .git_manager import working_directory
from .models import DEFAULT_REMOTE, GitRepositoryError, ReconcileStatus, SubmoduleRef
from .prompt_interface import NoOpPrompt, SyncPrompt


logger = logging.getLogger(__name__)


class DivergenceReconciler:
    """Turns a divergent submodule into one whose remote branch holds all local work."""

    def __init__(self, prompt: SyncPrompt = None, remote_name: str = DEFAULT_REMOTE) -> None:
        self.prompt = prompt or NoOpPrompt()
        self.remote_name = remote_name
        # Why the most recent reconcile() returned FAILED
        self.last_error: Optional[str] = None

    def reconcile(self, submodule: SubmoduleRef) -> ReconcileStatus:
        """
        Commit uncommitted changes (after asking for a message) and push the current branch.

        Returns:
            RECONCILED when the push succeeded, ABORTED when the operator gave an
            empty commit message, FAILED otherwise (the reason is kept in
            ``last_error``)
        """
        self.last_error = None
        try:
            with working_directory(submodule.abs_path):
                return self._reconcile_in_place(submodule)
        except (GitRepositoryError, OSError) as e:
            # Failures before the commit/push steps (branch lookup, status read)
            self.last_error = str(e)
            logger.error(f"Reconciliation of {submodule.path} failed: {e}")
            self.prompt.show_message(
                f"Failed to reconcile {submodule.path}: {e}", style="bold red"
            )
            return ReconcileStatus.FAILED

    def _reconcile_in_place(self, submodule: SubmoduleRef) -> ReconcileStatus:
        gm = submodule.git_manager
        branch = gm.get_current_branch()
        if branch == "HEAD":
            self.last_error = "detached HEAD"
            self.prompt.show_message(
                f"{submodule.path} is in detached HEAD state; nothing to push to.",
                style="bold red",
            )
            logger.error(f"Cannot push {submodule.path}: detached HEAD")
            return ReconcileStatus.FAILED

        # Re-read at act time; the detector's answer may be stale
        if gm.get_short_status().strip():
            self.prompt.show_message(
                f"\nUncommitted changes found in {submodule.path}", style="yellow"
            )
            self.prompt.show_changes(submodule.path, gm.get_status())

            message = self.prompt.ask_commit_message(submodule.path)
            if not message or not message.strip():
                logger.info(f"Commit in {submodule.path} aborted by operator")
                self.prompt.show_message(
                    "Commit aborted. No changes were pushed.", style="yellow"
                )
                return ReconcileStatus.ABORTED

            try:
                gm.add_all()
                gm.commit(message.strip())
            except GitRepositoryError as e:
                self.last_error = str(e)
                logger.error(f"Commit in {submodule.path} failed: {e}")
                self.prompt.show_message(
                    f"Error committing changes in {submodule.path}!", style="bold red"
                )
                return ReconcileStatus.FAILED

        self.prompt.show_message(
            f"Pushing changes in {submodule.path} to {self.remote_name}/{branch}...",
            style="green",
        )
        try:
            gm.push(self.remote_name, branch)
        except GitRepositoryError as e:
            self.last_error = str(e)
            logger.error(f"Push of {submodule.path} failed: {e}")
            self.prompt.show_message(
                f"Failed to push changes in {submodule.path}!", style="bold red"
            )
            return ReconcileStatus.FAILED

        self.prompt.show_message(
            f"Successfully pushed changes in {submodule.path}!", style="bold green"
        )
        return ReconcileStatus.RECONCILED
