"""
Git repository management and operations.
"""

from __future__ import annotations

import logging
import os
import shlex
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union
from git import Repo, InvalidGitRepositoryError, NoSuchPathError
from git.exc import CommandError

from .models import GitRepositoryError


logger = logging.getLogger(__name__)


@contextmanager
def working_directory(path: Union[str, Path]) -> Iterator[Path]:
    """Change into `path` for the duration of the block.

    The previous working directory is restored on every exit path, including
    exceptions raised inside the block.
    """
    previous = Path.cwd()
    target = Path(path)
    os.chdir(target)
    logger.debug(f"Entered {target} (from {previous})")
    try:
        yield target
    finally:
        os.chdir(previous)
        logger.debug(f"Restored working directory {previous}")


class GitManager:
    """Runs the Git operations the sync workflow needs against one working tree."""

    def __init__(
        self, repo_path: Optional[Path] = None, search_parent_directories: bool = True
    ) -> None:
        """Initialize Git manager with optional repository path.

        Submodules must be opened with ``search_parent_directories=False`` so
        that a missing submodule never resolves to the parent repository.
        """
        self.repo_path = Path(repo_path or Path.cwd()).resolve()
        self.search_parent_directories = search_parent_directories
        self._repo: Optional[Repo] = None

    @property
    def repo(self) -> Repo:
        """Get the Git repository instance."""
        if self._repo is None:
            self._repo = self._discover_repository()
        return self._repo

    @property
    def working_dir(self) -> Path:
        return Path(self.repo.working_dir)

    def _discover_repository(self) -> Repo:
        """Open the repository at repo_path, walking up when allowed."""
        search_path = self.repo_path

        logger.debug(f"Discovering repository in: {search_path}")
        if self.search_parent_directories:
            while search_path != search_path.parent:
                try:
                    repo = Repo(search_path)
                    logger.info(f"Found Git repository at: {search_path}")
                    return repo
                except (InvalidGitRepositoryError, NoSuchPathError):
                    search_path = search_path.parent

        try:
            return Repo(self.repo_path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            where = "or any parent directory" if self.search_parent_directories else "(submodule not checked out?)"
            raise GitRepositoryError(f"No Git repository found at {self.repo_path} {where}") from e

    def _run(self, command: str, *args: str) -> str:
        """Invoke a git subcommand, converting any command failure into GitRepositoryError."""
        logger.debug(f"Running 'git {command} {' '.join(args)}' in {self.repo_path}")
        try:
            return getattr(self.repo.git, command)(*args)
        except CommandError as e:
            logger.error(f"git {command} failed in {self.repo_path}: {e}")
            raise GitRepositoryError(f"git {command} failed in {self.repo_path}: {e}") from e

    # --- Submodule update ---
    def submodule_init(self) -> None:
        """Register submodules listed in .gitmodules that are not yet initialized."""
        self._run("submodule", "init")
        logger.info(f"Initialized submodules in {self.repo_path}")

    def submodule_update_remote(self) -> None:
        """Update all submodules recursively to the tip of their remote-tracking branch."""
        self._run("submodule", "update", "--remote", "--recursive")
        logger.info(f"Updated submodules from remote in {self.repo_path}")

    def submodule_foreach_checkout_pull(self, branch_name: str) -> None:
        """Check out `branch_name` in every submodule and fast-forward it from its remote."""
        self._run("submodule", "foreach", f"git checkout {shlex.quote(branch_name)} && git pull")
        logger.info(f"Checked out and pulled {branch_name} in every submodule of {self.repo_path}")

    def list_submodule_paths(self) -> List[str]:
        """Return submodule paths declared in .gitmodules, in declaration order."""
        try:
            return [Path(sm.path).as_posix() for sm in self.repo.submodules]
        except (CommandError, ValueError, KeyError) as e:
            logger.error(f"Error reading submodules of {self.repo_path}: {e}")
            raise GitRepositoryError(f"Could not read .gitmodules in {self.repo_path}: {e}") from e

    # --- Working tree inspection ---
    def get_short_status(self) -> str:
        """Return `git status -s` output; empty when the working tree is clean."""
        return self._run("status", "-s")

    def get_status(self) -> str:
        """Return the long-form `git status` output for display."""
        return self._run("status")

    def get_unpushed_commits(self) -> List[str]:
        """Return one-line summaries of commits on HEAD that no remote-tracking branch contains."""
        output = self._run("log", "--oneline", "HEAD", "--not", "--remotes")
        return [ln.strip() for ln in output.splitlines() if ln.strip()]

    def get_current_branch(self) -> str:
        """Get the current branch name ('HEAD' when detached)."""
        return self._run("rev-parse", "--abbrev-ref", "HEAD").strip()

    # --- History mutation ---
    def add_all(self) -> None:
        """Stage every change in the working tree, including deletions and new files."""
        self._run("add", "-A")

    def add_paths(self, paths: List[str]) -> None:
        """Stage exactly the given paths."""
        # The '--' ensures pathspec is not interpreted as an option
        self._run("add", "--", *paths)
        logger.info(f"Staged {paths} in {self.repo_path}")

    def commit(self, message: str) -> None:
        self._run("commit", "-m", message)
        logger.info(f"Committed in {self.repo_path}: {message}")

    def push(self, remote_name: str, branch_name: str) -> None:
        """Push `branch_name` to the same-named branch on `remote_name`."""
        self._run("push", remote_name, branch_name)
        logger.info(f"Pushed {branch_name} to {remote_name} from {self.repo_path}")
