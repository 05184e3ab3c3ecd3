"""Version-control collaborator backed by the `git` executable."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from aurmaint.core.errors import CommitFailure
from aurmaint.io._process import run_command


class Git:
    def __init__(self, repo_dir: Path) -> None:
        self.repo_dir = Path(repo_dir)

    def stage(self, names: Sequence[str]) -> None:
        """Stage exactly `names`.

        Raises:
            CommitFailure: if `git add` fails (nothing can be committed).
        """
        res = run_command(["git", "add", "--", *names], cwd=self.repo_dir, capture=True)
        if not res.ok:
            raise CommitFailure(f"git add {' '.join(names)} failed ({res.returncode}): {res.stderr.strip()}")

    def commit(self, message: str) -> bool:
        return run_command(["git", "commit", "-m", message], cwd=self.repo_dir).ok

    def push(self, remote: str, branch: str) -> bool:
        return run_command(["git", "push", remote, branch], cwd=self.repo_dir).ok
