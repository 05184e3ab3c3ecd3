"""Orchestration of a single maintenance run."""

from __future__ import annotations

from .run import RunReport, RunState, check_package, maintain

__all__ = [
    "RunReport",
    "RunState",
    "check_package",
    "maintain",
]
