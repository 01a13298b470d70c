"""PromptPilot - hierarchical file selection and incremental name search."""

from promptpilot.engine import PromptPilotEngine, build_engine

__version__ = "0.1.0"

__all__ = ["PromptPilotEngine", "__version__", "build_engine"]
