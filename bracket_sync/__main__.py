"""Entry point for running the sync via python -m bracket_sync"""

from bracket_sync.main import cli

if __name__ == "__main__":
    cli()
