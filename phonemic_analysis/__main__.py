"""
Entry point for running Phonemic Analysis as a module.

Usage:
    python -m phonemic_analysis --help
    python -m phonemic_analysis overview
    python -m phonemic_analysis validate --all
    python -m phonemic_analysis compare Rotokas Hawaiian
"""
from .cli import app


if __name__ == "__main__":
    app()
