"""Allow ``python -m tmuxstatus``."""

from tmuxstatus.cli.main import cli

if __name__ == "__main__":
    cli()
