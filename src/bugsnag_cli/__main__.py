"""
Entry point for running Bugsnag CLI as a module.

This allows users to run the CLI using:
    python -m bugsnag_cli [command] [options]
"""

from bugsnag_cli.cli.app import main

if __name__ == "__main__":
    main()
