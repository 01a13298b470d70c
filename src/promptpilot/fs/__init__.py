"""Filesystem collaborator exports."""

from promptpilot.fs.store import (
    EntryKind,
    FileStat,
    FileStore,
    FsEvent,
    FsEventKind,
    LocalFileStore,
)

__all__ = [
    "EntryKind",
    "FileStat",
    "FileStore",
    "FsEvent",
    "FsEventKind",
    "LocalFileStore",
]
