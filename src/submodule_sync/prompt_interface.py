"""
UI-agnostic prompt interface for operator interactions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class SyncPrompt(ABC):
    """Abstract interface for talking to the operator during a sync run."""

    @abstractmethod
    def show_message(self, message: str, style: str = "") -> None:
        """
        Display a progress or status line.

        Args:
            message: Text to display
            style: Optional style hint for UI implementations (e.g. "bold red")
        """
        pass

    @abstractmethod
    def show_changes(self, label: str, status_text: str) -> None:
        """
        Show the uncommitted changes of a repository before asking for a message.

        Args:
            label: Submodule path or parent repository label
            status_text: Long-form status output
        """
        pass

    @abstractmethod
    def confirm_reconcile(self, submodule_path: str) -> bool:
        """
        Ask whether local changes in a divergent submodule should be committed and pushed.

        Returns:
            True to reconcile, False to skip this submodule
        """
        pass

    @abstractmethod
    def ask_commit_message(self, label: str) -> str:
        """
        Ask for a commit message. An empty or whitespace-only answer aborts.

        Args:
            label: What is being committed (submodule path or parent repository)

        Returns:
            The message as typed by the operator
        """
        pass

    @abstractmethod
    def confirm_push(self, label: str, remote_name: str, branch_name: str) -> bool:
        """
        Ask whether a freshly made commit should be pushed.

        Returns:
            True to push, False to keep the commit local
        """
        pass


class NoOpPrompt(SyncPrompt):
    """No-operation prompt that declines everything."""

    def show_message(self, message: str, style: str = "") -> None:
        pass

    def show_changes(self, label: str, status_text: str) -> None:
        pass

    def confirm_reconcile(self, submodule_path: str) -> bool:
        return False

    def ask_commit_message(self, label: str) -> str:
        return ""

    def confirm_push(self, label: str, remote_name: str, branch_name: str) -> bool:
        return False
