"""Internal rewrite/write helpers for the PKGBUILD codec.

This module contains:
- `Line` records (text + original line ending, so output is byte-exact)
- the rewrite state machine that edits `pkgver`, `pkgrel` and `provides`
- atomic file replacement

This is a private module; public API is in `pkgbuild.py`.
"""

from __future__ import annotations

import os
import re
import shutil
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable

from aurmaint.codecs._pkgbuild_parser import _Env, _Incomplete, split_words
from aurmaint.core.model import PKGREL, PKGVER, PROVIDES, PackageKind, RewriteResult

_PKGVER_RE = re.compile(r"^pkgver=")
_PKGREL_RE = re.compile(r"^pkgrel=")
_PROVIDES_RE = re.compile(r"^provides=")
_CONSTRAINT_RE = re.compile(r"[<>=]")


@dataclass(frozen=True)
class Line:
    number: int
    text: str
    ending: str

    def render(self) -> str:
        return self.text + self.ending

    def replace(self, text: str) -> "Line":
        return Line(self.number, text, self.ending)


def split_lines(text: str) -> tuple[Line, ...]:
    """Split on `\\n` only, keeping each line's exact ending (`\\n`, `\\r\\n` or none)."""
    parts = text.split("\n")
    out: list[Line] = []
    for idx, part in enumerate(parts):
        last = idx == len(parts) - 1
        if last and part == "":
            break
        ending = "" if last else "\n"
        if part.endswith("\r") and not last:
            part, ending = part[:-1], "\r\n"
        out.append(Line(idx + 1, part, ending))
    return tuple(out)


def join_lines(lines: Iterable[Line]) -> str:
    return "".join(line.render() for line in lines)


def provided_name(item: str | None) -> str | None:
    """Strip a version constraint: `foo=1.2` -> `foo`, `foo>=1` -> `foo`."""
    if not item:
        return None
    name = _CONSTRAINT_RE.split(item, 1)[0].strip()
    return name or None


def _array_closes(text: str) -> bool:
    try:
        split_words(text, _Env({}, {}), array=True)
    except _Incomplete:
        return False
    return True


class _State(Enum):
    SCANNING = "scanning"
    IN_PROVIDES = "in_provides"


class Rewriter:
    """Single-pass line processor.

    - first `pkgver=` line -> `pkgver=<version>`; later ones pass through
    - every `pkgrel=` line -> `pkgrel=1`
    - `provides=` -> `provides=('<name>=<current_version>')` for fixed-version
      packages only
    - everything else passes through unchanged

    Line count is preserved, with one exception: a `provides` array spread
    over several lines collapses into the single rewritten line.

    Feed lines with `feed()`, then call `result()`.
    """

    def __init__(
        self,
        *,
        version: str,
        kind: PackageKind,
        current_version: str | None,
        provide: str | None,
    ) -> None:
        self.version = version
        self.kind = kind
        self.current_version = current_version or ""
        self.provide_name = provided_name(provide)
        self.state = _State.SCANNING
        self.version_found = False
        self.changed: set[str] = set()
        self.out: list[Line] = []
        self._pending = ""

    def _emit(self, line: Line, text: str, field: str) -> None:
        if text != line.text:
            self.changed.add(field)
        self.out.append(line.replace(text))

    def feed(self, line: Line) -> None:
        if self.state is _State.IN_PROVIDES:
            self._pending += "\n" + line.text
            if _array_closes(self._pending):
                self.state = _State.SCANNING
            return

        text = line.text
        if _PKGVER_RE.match(text):
            if self.version_found:
                self.out.append(line)
                return
            self.version_found = True
            self._emit(line, f"{PKGVER}={self.version}", PKGVER)
        elif _PKGREL_RE.match(text):
            self._emit(line, f"{PKGREL}=1", PKGREL)
        elif _PROVIDES_RE.match(text) and not self.kind.is_vcs and self.provide_name:
            self._emit(line, f"{PROVIDES}=('{self.provide_name}={self.current_version}')", PROVIDES)
            rest = text[len("provides="):]
            if rest.startswith("(") and not _array_closes(rest[1:]):
                self._pending = rest[1:]
                self.state = _State.IN_PROVIDES
                self.changed.add(PROVIDES)
        else:
            self.out.append(line)

    def result(self) -> RewriteResult:
        return RewriteResult(
            text=join_lines(self.out),
            version_found=self.version_found,
            changed=frozenset(self.changed),
        )


def write_text_atomic(path: Path, text: str) -> None:
    """Replace `path` with `text` via a temp file in the same directory and `os.replace`.

    The original file is untouched unless the rename happens. File mode is preserved.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp = Path(tmp_name)
    try:
        # newline="" prevents Python from translating newlines on write
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        if path.exists():
            shutil.copymode(path, tmp)
        else:
            os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
