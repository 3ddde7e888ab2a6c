"""
Data models for the submodule synchronization tool.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    # For type checkers only; avoids runtime circular import
    from .git_manager import GitManager


DEFAULT_INTEGRATION_BRANCH = "main"
DEFAULT_REMOTE = "origin"


def _normalize_path(path: str) -> str:
    return Path(path).as_posix().rstrip("/")


@dataclass
class SyncConfig:
    """Which submodules to manage and which branch to integrate on."""

    submodule_paths: Tuple[str, ...] = ()
    integration_branch: str = DEFAULT_INTEGRATION_BRANCH
    remote_name: str = DEFAULT_REMOTE

    def __post_init__(self) -> None:
        """Normalize paths, keeping the first occurrence of each."""
        seen: List[str] = []
        for raw in self.submodule_paths:
            if not str(raw).strip():
                continue
            normalized = _normalize_path(str(raw).strip())
            if normalized not in seen:
                seen.append(normalized)
        self.submodule_paths = tuple(seen)


@dataclass
class SubmoduleRef:
    """A submodule of the parent repository, identified by its relative path."""

    path: str
    abs_path: Path
    git_manager: Optional["GitManager"] = None

    def __post_init__(self) -> None:
        """Ensure abs_path is absolute."""
        self.abs_path = Path(self.abs_path).resolve()


@dataclass(frozen=True)
class DivergenceState:
    """Local state of a submodule compared to what its remote already has."""

    has_uncommitted_changes: bool = False
    has_unpushed_commits: bool = False

    @property
    def is_divergent(self) -> bool:
        return self.has_uncommitted_changes or self.has_unpushed_commits


class UpdateStage(Enum):
    """Stages of the submodule update, in execution order."""

    INIT = "init"
    REMOTE_UPDATE = "remote-update"
    CHECKOUT_PULL = "checkout-pull"


@dataclass
class UpdateResult:
    """Result of bringing every submodule to its latest upstream revision."""

    success: bool
    failed_stage: Optional[UpdateStage] = None
    error: Optional[str] = None


class ReconcileStatus(Enum):
    """Per-submodule outcome of a run."""

    CLEAN = "clean"
    DIVERGENT = "divergent"  # detected only, no action taken
    DECLINED = "declined"
    ABORTED = "aborted"
    FAILED = "failed"
    RECONCILED = "reconciled"
    DETECTION_FAILED = "detection_failed"


class RepinStatus(Enum):
    """Outcome of updating the parent repository's submodule pointers."""

    NOT_RUN = "not_run"
    NOTHING_TO_REPIN = "nothing_to_repin"
    STATUS_FAILED = "status_failed"
    ABORTED = "aborted"
    COMMIT_FAILED = "commit_failed"
    COMMITTED = "committed"
    PUSHED = "pushed"
    PUSH_FAILED = "push_failed"


@dataclass
class RepinResult:
    status: RepinStatus = RepinStatus.NOT_RUN
    staged_paths: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status not in (
            RepinStatus.STATUS_FAILED,
            RepinStatus.COMMIT_FAILED,
            RepinStatus.PUSH_FAILED,
        )


class SyncState(Enum):
    """States of a synchronization run."""

    INIT = "init"
    UPDATING = "updating"
    DETECTING = "detecting"
    RECONCILING = "reconciling"
    REPIN_DECISION = "repin_decision"
    REPINNING = "repinning"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class SubmoduleReport:
    """What happened to one submodule during a run."""

    path: str
    divergence: Optional[DivergenceState] = None
    status: ReconcileStatus = ReconcileStatus.CLEAN
    error: Optional[str] = None


@dataclass
class SyncOutcome:
    """Aggregate result of a synchronization run.

    Only an update failure ends the run in ``ABORTED``. Failed or skipped
    reconciliations and re-pins are reported per item while the run still
    finishes in ``DONE``.
    """

    state: SyncState = SyncState.INIT
    update: Optional[UpdateResult] = None
    reports: List[SubmoduleReport] = field(default_factory=list)
    repin: RepinResult = field(default_factory=RepinResult)

    @property
    def any_reconciled(self) -> bool:
        return any(r.status is ReconcileStatus.RECONCILED for r in self.reports)

    @property
    def exit_code(self) -> int:
        return 1 if self.state is SyncState.ABORTED else 0

    def get_report(self, path: str) -> Optional[SubmoduleReport]:
        for report in self.reports:
            if report.path == path:
                return report
        return None


class SyncError(Exception):
    """Base exception for synchronization operations."""

    pass


class GitRepositoryError(SyncError):
    """Exception raised for Git repository related errors."""

    pass


class SubmoduleUpdateError(SyncError):
    """Exception raised when a stage of the submodule update fails."""

    def __init__(self, stage: UpdateStage, message: str) -> None:
        super().__init__(message)
        self.stage = stage
