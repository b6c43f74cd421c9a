"""Main entry point for task-cli.

Supports both direct invocation (`python -m taskcli`) and package entry point.
"""

from taskcli.cli import cli

if __name__ == "__main__":
    cli()
