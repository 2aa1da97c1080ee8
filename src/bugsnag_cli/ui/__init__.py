"""Interactive terminal UI for Bugsnag CLI."""

from .prompts import WizardPrompter

__all__ = ["WizardPrompter"]
