"""Subprocess helper shared by the build and git collaborators."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    command: tuple[str, ...]
    cwd: str
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_command(command: Sequence[str], *, cwd: Path, capture: bool = False) -> CommandResult:
    """Run `command` in `cwd`.

    With `capture=False` output streams straight to the terminal (long builds
    stay visible). A missing executable is reported as exit code 127.
    """
    cmd = tuple(str(c) for c in command)
    log.debug("running %s in %s", " ".join(cmd), cwd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            check=False,
            text=True,
            capture_output=capture,
        )
    except OSError as e:
        log.debug("could not start %s: %s", cmd[0], e)
        return CommandResult(cmd, str(cwd), 127, "", str(e))
    return CommandResult(cmd, str(cwd), proc.returncode, proc.stdout or "", proc.stderr or "")
