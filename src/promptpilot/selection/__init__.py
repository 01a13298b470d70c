"""Selection Set exports."""

from promptpilot.selection.selection_set import SelectedPath, SelectionSet

__all__ = ["SelectedPath", "SelectionSet"]
