"""PromptPilot CLI."""
