"""CLI entry point for ``python -m charstats``."""

from charstats.main import run

if __name__ == "__main__":
    run()
