"""
Driver for the pull, detect-divergence, reconcile, re-pin workflow.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from .divergence_detector import DivergenceDetector
from .divergence_reconciler import DivergenceReconciler
from .git_manager import GitManager
from .models import (
    ReconcileStatus,
    RepinResult,
    SubmoduleRef,
    SubmoduleReport,
    SyncConfig,
    SyncError,
    SyncOutcome,
    SyncState,
)
from .parent_repinner import ParentRepinner
from .prompt_interface import NoOpPrompt, SyncPrompt
from .submodule_updater import SubmoduleUpdater


logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """Runs the synchronization pipeline over the configured submodules, strictly in order."""

    def __init__(
        self,
        config: Optional[SyncConfig] = None,
        prompt: Optional[SyncPrompt] = None,
        root_path: Optional[Path] = None,
    ) -> None:
        """Open the parent repository and resolve the submodules to manage.

        When the config names no submodules, the ones declared in the parent's
        .gitmodules are used.
        """
        self.config = config or SyncConfig()
        self.prompt = prompt or NoOpPrompt()
        self.git_manager = GitManager(root_path or Path.cwd())
        # Anchor at the repository root even when invoked from a subdirectory
        self.root_path = Path(self.git_manager.repo.working_dir).resolve()

        paths = list(self.config.submodule_paths)
        if not paths:
            paths = self.git_manager.list_submodule_paths()
            logger.info(f"Discovered submodules from .gitmodules: {paths}")
        if not paths:
            raise SyncError(f"No submodules configured or declared in {self.root_path}")

        self.submodules: List[SubmoduleRef] = [
            SubmoduleRef(
                path=p,
                abs_path=self.root_path / p,
                git_manager=GitManager(self.root_path / p, search_parent_directories=False),
            )
            for p in paths
        ]

        self.updater = SubmoduleUpdater(
            self.git_manager, self.config.integration_branch, self.prompt
        )
        self.detector = DivergenceDetector(self.prompt)
        self.reconciler = DivergenceReconciler(self.prompt, self.config.remote_name)
        self.repinner = ParentRepinner(self.git_manager, self.prompt, self.config.remote_name)

        self.state = SyncState.INIT
        logger.info(
            f"Initialized sync for {self.root_path} with submodules "
            f"{[s.path for s in self.submodules]} on {self.config.integration_branch}"
        )

    @property
    def submodule_paths(self) -> List[str]:
        return [s.path for s in self.submodules]

    def _transition(self, state: SyncState) -> None:
        logger.debug(f"State {self.state.value} -> {state.value}")
        self.state = state

    def run(self) -> SyncOutcome:
        """Run the whole pipeline and return its outcome.

        Only a failed update aborts. Reconciliation and re-pin failures are
        reported per item and the run still ends in DONE.
        """
        outcome = SyncOutcome()

        self._transition(SyncState.UPDATING)
        outcome.update = self.updater.update()
        if not outcome.update.success:
            self.prompt.show_message("Submodule update failed. Exiting.", style="bold red")
            self._transition(SyncState.ABORTED)
            outcome.state = self.state
            return outcome

        self.prompt.show_message("\n[2] Checking for changes in submodules...", style="bold green")
        for submodule in self.submodules:
            outcome.reports.append(self._process_submodule(submodule))

        self._transition(SyncState.REPIN_DECISION)
        if outcome.any_reconciled:
            self._transition(SyncState.REPINNING)
            reconciled = [
                r.path for r in outcome.reports if r.status is ReconcileStatus.RECONCILED
            ]
            logger.info(f"Re-pinning after reconciling {reconciled}")
            outcome.repin = self.repinner.repin(self.submodule_paths)
        else:
            logger.info("No submodule reconciled; skipping re-pin")
            outcome.repin = RepinResult()

        self._transition(SyncState.DONE)
        outcome.state = self.state
        return outcome

    def _process_submodule(self, submodule: SubmoduleRef) -> SubmoduleReport:
        self._transition(SyncState.DETECTING)
        report = SubmoduleReport(path=submodule.path)
        report.divergence = self.detector.detect(submodule)

        if report.divergence is None:
            report.status = ReconcileStatus.DETECTION_FAILED
            report.error = self.detector.last_error
            return report

        if not report.divergence.is_divergent:
            self.prompt.show_message(
                f"No changes detected in {submodule.path} submodule", style="green"
            )
            report.status = ReconcileStatus.CLEAN
            return report

        self.prompt.show_message(f"Changes detected in {submodule.path} submodule", style="yellow")
        if not self.prompt.confirm_reconcile(submodule.path):
            self.prompt.show_message(f"Skipping push for {submodule.path}", style="yellow")
            report.status = ReconcileStatus.DECLINED
            return report

        self._transition(SyncState.RECONCILING)
        report.status = self.reconciler.reconcile(submodule)
        if report.status is ReconcileStatus.FAILED:
            report.error = self.reconciler.last_error
        return report

    def collect_status(self) -> List[SubmoduleReport]:
        """Detect divergence for every submodule without updating or changing anything."""
        reports = []
        for submodule in self.submodules:
            divergence = self.detector.detect(submodule)
            if divergence is None:
                status = ReconcileStatus.DETECTION_FAILED
            elif divergence.is_divergent:
                status = ReconcileStatus.DIVERGENT
            else:
                status = ReconcileStatus.CLEAN
            reports.append(
                SubmoduleReport(
                    path=submodule.path,
                    divergence=divergence,
                    status=status,
                    error=self.detector.last_error,
                )
            )
        return reports
