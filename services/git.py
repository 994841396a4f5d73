"""
Git access for fetching lockfile revisions.

Every call shells out to git with a timeout; nothing here is cached.
"""
import logging
import os
import subprocess
from pathlib import PurePosixPath
from typing import Optional

from core.errors import LockdiffError
from config import settings

logger = logging.getLogger(__name__)


class GitError(LockdiffError):
    """A git command failed, timed out, or git is not installed."""


class GitClient:
    """
    Thin wrapper around the git command line.

    Usage:
        git = GitClient("/path/to/repo")
        old_text = git.show("HEAD", "package-lock.json")
    """

    def __init__(
        self,
        cwd: Optional[str] = None,
        executable: Optional[str] = None,
        timeout: Optional[int] = None
    ):
        self.cwd = cwd
        self.executable = executable or settings.GIT_EXECUTABLE
        self.timeout = timeout if timeout is not None else settings.GIT_TIMEOUT

    def _run(self, *args: str) -> str:
        command = [self.executable, *args]
        logger.debug(f"Running: {' '.join(command)}")
        try:
            completed = subprocess.run(
                command,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise GitError(f"git executable not found: {self.executable}") from e
        except subprocess.TimeoutExpired as e:
            raise GitError(f"git {args[0]} timed out after {self.timeout}s") from e

        if completed.returncode != 0:
            message = completed.stderr.strip() or f"exit status {completed.returncode}"
            logger.warning(f"git {args[0]} failed: {message}")
            raise GitError(f"git {' '.join(args)}: {message}")
        return completed.stdout

    def toplevel(self) -> str:
        """Absolute path of the repository root."""
        return self._run("rev-parse", "--show-toplevel").strip()

    def show(self, rev: str, path: str) -> str:
        """Contents of `path` (absolute, or relative to cwd) at revision `rev`."""
        path = str(path)
        if os.path.isabs(path):
            path = os.path.relpath(path, self.cwd or os.getcwd())
        relative = PurePosixPath(path.replace("\\", "/"))
        return self._run("show", f"{rev}:./{relative}")

    def is_modified(self, path: str) -> bool:
        """Whether `path` has staged, unstaged or untracked changes."""
        return bool(self._run("status", "--porcelain", "--", path).strip())

    def is_untracked(self, path: str) -> bool:
        """Whether `path` exists in the working tree but is unknown to git."""
        return self._run("status", "--porcelain", "--", path).startswith("??")

    def _name_status(self, revs: list[str], *paths: str) -> list[tuple[str, str]]:
        output = self._run("diff", "--name-status", "--no-renames", *revs, "--", *paths)
        entries = []
        for line in output.splitlines():
            if not line:
                continue
            status, _, path = line.partition("\t")
            entries.append((status[:1], path))
        return entries

    def file_status(self, path: str, rev: str = "HEAD", rev_b: Optional[str] = None) -> Optional[str]:
        """
        Status letter of `path` between `rev` and `rev_b` (or the working tree).

        "A" means the file is missing at `rev`, "D" that it is missing on the
        other side. None when git reports no difference; untracked files
        are not listed either.
        """
        revs = [rev] if rev_b is None else [rev, rev_b]
        entries = self._name_status(revs, str(path))
        return entries[0][0] if entries else None

    def changed_lockfiles(
        self,
        rev: str = "HEAD",
        name: Optional[str] = None,
        rev_b: Optional[str] = None
    ) -> list[tuple[str, str]]:
        """
        Lockfiles that differ between `rev` and `rev_b` (or the working tree).

        Returns (status letter, path) pairs with paths relative to the
        repository root, in git's order.
        """
        name = name or settings.LOCKFILE_NAME
        revs = [rev] if rev_b is None else [rev, rev_b]
        return [
            (status, path) for status, path in self._name_status(revs)
            if PurePosixPath(path).name == name
        ]
