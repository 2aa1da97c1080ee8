"""
CLI interface package for Bugsnag CLI.

This package contains the command-line interface components: the Typer
application with its commands and the console output helpers.
"""

__all__ = ["app", "output"]
