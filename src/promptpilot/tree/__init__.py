"""Tree listing exports.

The adapter lives in ``promptpilot.tree.adapter`` and is not re-exported
here so that ``promptpilot.selection`` can import the lister without a
cycle.
"""

from promptpilot.tree.lister import EntryLister, FilesystemEntry, is_hidden

__all__ = ["EntryLister", "FilesystemEntry", "is_hidden"]
