"""Internal parsing helpers for the PKGBUILD codec.

Private module for parsing logic; public API is in `pkgbuild.py`.

The parser never executes the file. It understands the subset of shell that
PKGBUILD metadata is written in:

- `name=value` and `name=(item item ...)` at top level (arrays may span lines)
- `name+=(...)` appends
- single/double quoting, backslash escapes, `#` comments
- `$name`, `${name}`, `${name[0]}`, `${name[@]}`, `${name:-default}`,
  `${name%pat}`, `${name%%pat}`, `${name#pat}`, `${name##pat}` against
  variables assigned earlier in the file (unknown variables expand to "")
- `name() {` / `function name {` routine headers; their bodies are skipped
"""

from __future__ import annotations

import re
from fnmatch import fnmatchcase
from typing import Mapping

from aurmaint.core.errors import ParseError

_ASSIGN_RE = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*)(\+?)=(.*)$", re.DOTALL)
_FUNC_RE = re.compile(
    r"^\s*(?:function\s+(?P<kw>[A-Za-z_][\w.-]*)\s*(?:\(\s*\))?|(?P<plain>[A-Za-z_][\w.-]*)\s*\(\s*\))"
)
_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class _Incomplete(Exception):
    """Input ended inside a quote or an unclosed array; more lines are needed."""


# ----------------------------
# Parameter expansion
# ----------------------------


class _Env:
    def __init__(self, scalars: Mapping[str, str], arrays: Mapping[str, tuple[str, ...]]) -> None:
        self.scalars = scalars
        self.arrays = arrays

    def items(self, name: str) -> tuple[str, ...]:
        if name in self.arrays:
            return self.arrays[name]
        if name in self.scalars:
            return (self.scalars[name],)
        return ()

    def value(self, name: str) -> str:
        items = self.items(name)
        return items[0] if items else ""


def _trim(value: str, op: str, pattern: str) -> str:
    n = len(value)
    if op == "%":
        rng = range(n, -1, -1)  # shortest suffix first
    elif op == "%%":
        rng = range(0, n + 1)
    elif op == "#":
        rng = range(0, n + 1)  # shortest prefix first
    else:
        rng = range(n, -1, -1)
    for k in rng:
        if op.startswith("%"):
            if fnmatchcase(value[k:], pattern):
                return value[:k]
        elif fnmatchcase(value[:k], pattern):
            return value[k:]
    return value


def _expand_braced(body: str, env: _Env) -> str:
    m = _NAME_RE.match(body)
    if not m:
        # ${#name}, ${!name} and friends are not metadata; keep them verbatim.
        return "${" + body + "}"
    name = m.group(0)
    rest = body[m.end():]

    if rest.startswith("["):
        close = rest.find("]")
        index = rest[1:close] if close > 0 else ""
        rest = rest[close + 1:] if close > 0 else ""
        items = env.items(name)
        if index in ("@", "*"):
            value = " ".join(items)
        else:
            try:
                i = int(index)
            except ValueError:
                i = 0
            value = items[i] if 0 <= i < len(items) else ""
    else:
        value = env.value(name)

    if not rest:
        return value
    if rest.startswith(":-"):
        return value or rest[2:]
    for op in ("%%", "##", "%", "#"):
        if rest.startswith(op):
            return _trim(value, op, rest[len(op):])
    return value


def _expand(s: str, i: int, env: _Env) -> tuple[str, int]:
    """Expand the `$...` starting at `s[i]`; return (text, next index)."""
    nxt = s[i + 1] if i + 1 < len(s) else ""
    if nxt == "{":
        close = s.find("}", i + 2)
        if close < 0:
            raise _Incomplete()
        return _expand_braced(s[i + 2:close], env), close + 1
    if nxt == "(":
        # Command substitution cannot be evaluated statically; keep it verbatim.
        depth = 0
        j = i + 1
        while j < len(s):
            if s[j] == "(":
                depth += 1
            elif s[j] == ")":
                depth -= 1
                if depth == 0:
                    return s[i:j + 1], j + 1
            j += 1
        raise _Incomplete()
    m = _NAME_RE.match(s, i + 1)
    if m:
        return env.value(m.group(0)), m.end()
    return "$", i + 1


# ----------------------------
# Word splitting
# ----------------------------


def _read_double_quoted(s: str, i: int, env: _Env) -> tuple[str, int]:
    """Read a double-quoted string whose opening quote is at `s[i - 1]`."""
    out: list[str] = []
    while i < len(s):
        c = s[i]
        if c == '"':
            return "".join(out), i + 1
        if c == "\\" and i + 1 < len(s) and s[i + 1] in '$`"\\\n':
            if s[i + 1] != "\n":
                out.append(s[i + 1])
            i += 2
            continue
        if c == "$":
            text, i = _expand(s, i, env)
            out.append(text)
            continue
        out.append(c)
        i += 1
    raise _Incomplete()


def split_words(s: str, env: _Env, *, array: bool) -> list[str]:
    """Split shell text into words.

    With `array=True`, `s` is the text after an opening `(` and splitting stops
    at the matching unquoted `)`; `_Incomplete` is raised if none is found.
    Otherwise splitting stops at end of input or an unquoted `;`.
    """
    words: list[str] = []
    cur: list[str] = []
    in_word = False
    i = 0
    n = len(s)

    def flush() -> None:
        nonlocal cur, in_word
        if in_word:
            words.append("".join(cur))
        cur = []
        in_word = False

    while i < n:
        c = s[i]
        if c == "\\":
            if i + 1 < n and s[i + 1] != "\n":
                cur.append(s[i + 1])
                in_word = True
            i += 2
            continue
        if c == "'":
            close = s.find("'", i + 1)
            if close < 0:
                raise _Incomplete()
            cur.append(s[i + 1:close])
            in_word = True
            i = close + 1
            continue
        if c == '"':
            text, i = _read_double_quoted(s, i + 1, env)
            cur.append(text)
            in_word = True
            continue
        if c == "$":
            text, i = _expand(s, i, env)
            cur.append(text)
            in_word = True
            continue
        if c in " \t\r\n":
            flush()
            i += 1
            continue
        if c == "#" and not in_word:
            nl = s.find("\n", i)
            i = n if nl < 0 else nl
            continue
        if array and c == ")":
            flush()
            return words
        if c == ";" and not array:
            break
        cur.append(c)
        in_word = True
        i += 1

    if array:
        raise _Incomplete()
    flush()
    return words


# ----------------------------
# Line scanner
# ----------------------------


def _brace_delta(line: str, quote: str = "") -> tuple[int, str]:
    """Net `{`/`}` count of a routine-body line, outside quotes and comments.

    `quote` is the quote still open from the previous line ("", "'" or '"');
    the quote open at the end of this line is returned with the count.
    """
    delta = 0
    i = 0
    n = len(line)
    while i < n:
        c = line[i]
        if quote == "'":
            if c == "'":
                quote = ""
        elif c == "\\":
            i += 2
            continue
        elif quote == '"':
            if c == '"':
                quote = ""
        elif c in "'\"":
            quote = c
        elif c == "#" and (i == 0 or line[i - 1] in " \t;"):
            break
        elif c == "{":
            delta += 1
        elif c == "}":
            delta -= 1
        i += 1
    return delta, quote


def scan_pkgbuild(
    text: str,
) -> tuple[dict[str, str], dict[str, tuple[str, ...]], set[str]]:
    """Scan PKGBUILD text into (scalars, arrays, functions)."""
    lines = [line.rstrip("\r") for line in text.split("\n")]
    scalars: dict[str, str] = {}
    arrays: dict[str, tuple[str, ...]] = {}
    functions: set[str] = set()
    env = _Env(scalars, arrays)

    depth = 0
    body_quote = ""
    awaiting_body = False
    i = 0
    while i < len(lines):
        line = lines[i]
        lineno = i + 1
        i += 1

        if depth > 0 or awaiting_body:
            delta, body_quote = _brace_delta(line, body_quote)
            if awaiting_body:
                if delta <= 0:
                    continue
                awaiting_body = False
            depth = max(depth + delta, 0)
            if depth == 0:
                body_quote = ""
            continue

        fm = _FUNC_RE.match(line)
        if fm:
            functions.add(fm.group("kw") or fm.group("plain"))
            delta, body_quote = _brace_delta(line)
            if delta > 0:
                depth = delta
            elif "{" in line:
                # one-line routine: `name() { ...; }`
                body_quote = ""
            else:
                awaiting_body = True
            continue

        am = _ASSIGN_RE.match(line)
        if not am:
            continue
        name, append, rest = am.group(1), am.group(2) == "+", am.group(3)
        is_array = rest.startswith("(")
        body = rest[1:] if is_array else rest

        # Quotes and arrays may continue over following lines.
        while True:
            try:
                words = split_words(body, env, array=is_array)
                break
            except _Incomplete:
                if i >= len(lines):
                    kind = "array" if is_array else "quoted value"
                    raise ParseError(f"unterminated {kind} for '{name}'", lineno=lineno) from None
                body = body + "\n" + lines[i]
                i += 1

        if is_array:
            if append:
                arrays[name] = env.items(name) + tuple(words)
            else:
                arrays[name] = tuple(words)
            scalars.pop(name, None)
        else:
            value = words[0] if words else ""
            if append:
                value = env.value(name) + value
            if name in arrays:
                # `name=value` on an array replaces element 0 (shell semantics).
                arrays[name] = (value,) + arrays[name][1:]
            else:
                scalars[name] = value

    return scalars, arrays, functions
