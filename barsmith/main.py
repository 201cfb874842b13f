# barsmith/main.py
"""Main entry point for the barsmith CLI application."""

from barsmith.cli.interface import main_cli


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli(prog_name="barsmith")

if __name__ == '__main__':
    entrypoint()
