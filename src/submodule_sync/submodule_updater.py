"""
Bring every submodule to the latest revision of its integration branch.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Tuple

from .git_manager import GitManager
from .models import GitRepositoryError, SubmoduleUpdateError, UpdateResult, UpdateStage
from .prompt_interface import NoOpPrompt, SyncPrompt


logger = logging.getLogger(__name__)


STAGE_FAILURE_MESSAGES = {
    UpdateStage.INIT: "Error initializing submodules!",
    UpdateStage.REMOTE_UPDATE: "Error updating submodules from remote!",
    UpdateStage.CHECKOUT_PULL: "Error checking out {branch} or pulling in one or more submodules!",
}


class SubmoduleUpdater:
    """Runs init, remote update and per-submodule checkout+pull in the parent repository."""

    def __init__(
        self, git_manager: GitManager, integration_branch: str, prompt: SyncPrompt = None
    ) -> None:
        self.gm = git_manager
        self.integration_branch = integration_branch
        self.prompt = prompt or NoOpPrompt()

    def _stages(self) -> List[Tuple[UpdateStage, Callable[[], None]]]:
        return [
            (UpdateStage.INIT, self.gm.submodule_init),
            (UpdateStage.REMOTE_UPDATE, self.gm.submodule_update_remote),
            (
                UpdateStage.CHECKOUT_PULL,
                lambda: self.gm.submodule_foreach_checkout_pull(self.integration_branch),
            ),
        ]

    def _run_stage(self, stage: UpdateStage, action: Callable[[], None]) -> None:
        logger.debug(f"Update stage {stage.value} starting")
        try:
            action()
        except GitRepositoryError as e:
            message = STAGE_FAILURE_MESSAGES[stage].format(branch=self.integration_branch)
            raise SubmoduleUpdateError(stage, f"{message} {e}") from e

    def update(self) -> UpdateResult:
        """Run every stage in order; the first failure stops the remaining ones."""
        self.prompt.show_message("\n[1] Updating all submodules...", style="bold green")
        try:
            for stage, action in self._stages():
                self._run_stage(stage, action)
        except SubmoduleUpdateError as e:
            logger.error(f"Submodule update failed at stage {e.stage.value}: {e}")
            self.prompt.show_message(
                STAGE_FAILURE_MESSAGES[e.stage].format(branch=self.integration_branch),
                style="bold red",
            )
            return UpdateResult(success=False, failed_stage=e.stage, error=str(e))

        self.prompt.show_message("All submodules updated successfully!", style="green")
        logger.info("All submodules updated successfully")
        return UpdateResult(success=True)
