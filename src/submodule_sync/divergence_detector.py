"""
Detection of local divergence (uncommitted edits, unpushed commits) in a submodule.
"""

from __future__ import annotations

import logging
from typing import Optional

from .git_manager import working_directory
from .models import DivergenceState, GitRepositoryError, SubmoduleRef
from .prompt_interface import NoOpPrompt, SyncPrompt


logger = logging.getLogger(__name__)


class DivergenceDetector:
    """Read-only queries that tell whether a submodule differs from its remote."""

    def __init__(self, prompt: SyncPrompt = None) -> None:
        self.prompt = prompt or NoOpPrompt()
        # Why the most recent detect() returned None
        self.last_error: Optional[str] = None

    def detect(self, submodule: SubmoduleRef) -> Optional[DivergenceState]:
        """
        Return the divergence state of a submodule.

        Returns:
            DivergenceState, or None when the submodule could not be queried
            (the reason is kept in ``last_error``)
        """
        self.last_error = None
        try:
            with working_directory(submodule.abs_path):
                gm = submodule.git_manager
                status = gm.get_short_status()
                unpushed = gm.get_unpushed_commits()
        except (GitRepositoryError, OSError) as e:
            self.last_error = str(e)
            logger.error(f"Could not inspect submodule {submodule.path}: {e}")
            self.prompt.show_message(
                f"Could not inspect submodule {submodule.path}: {e}", style="bold red"
            )
            return None

        state = DivergenceState(
            has_uncommitted_changes=bool(status.strip()),
            has_unpushed_commits=bool(unpushed),
        )
        logger.info(
            f"Divergence in {submodule.path}: uncommitted={state.has_uncommitted_changes} "
            f"unpushed={state.has_unpushed_commits} ({len(unpushed)} commit(s))"
        )
        return state
