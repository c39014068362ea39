"""Keeps the specification in step with the files on disk."""

from layoutgen.sync.planner import (
    SyncPlan,
    apply_sync,
    missing_entries,
    plan_sync,
    resolve_project,
)
from layoutgen.sync.scanner import FilesystemScanner, UnmanagedEntry

__all__ = [
    "FilesystemScanner",
    "SyncPlan",
    "UnmanagedEntry",
    "apply_sync",
    "missing_entries",
    "plan_sync",
    "resolve_project",
]
