"""
Git Submodule Sync - keep a parent repository's submodules pulled, pushed and pinned.

This package pulls every managed submodule to its latest upstream revision, detects
uncommitted edits or unpushed commits, optionally commits and pushes them, and then
records the new submodule pointers in the parent repository.
"""

__version__ = "0.1.0"

from .sync_orchestrator import SyncOrchestrator
from .models import (
    DivergenceState,
    ReconcileStatus,
    RepinStatus,
    SubmoduleRef,
    SyncConfig,
    SyncOutcome,
    SyncState,
)
from .git_manager import GitManager
from .submodule_updater import SubmoduleUpdater
from .divergence_detector import DivergenceDetector
from .divergence_reconciler import DivergenceReconciler
from .parent_repinner import ParentRepinner

__all__ = [
    "SyncOrchestrator",
    "SyncConfig",
    "SyncOutcome",
    "SyncState",
    "SubmoduleRef",
    "DivergenceState",
    "ReconcileStatus",
    "RepinStatus",
    "GitManager",
    "SubmoduleUpdater",
    "DivergenceDetector",
    "DivergenceReconciler",
    "ParentRepinner",
]
