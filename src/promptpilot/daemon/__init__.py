"""Filesystem watching."""

from promptpilot.daemon.watcher import HARDCODED_DIRS, TreeWatcher, to_fs_events

__all__ = ["HARDCODED_DIRS", "TreeWatcher", "to_fs_events"]
