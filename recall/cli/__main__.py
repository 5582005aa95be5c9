"""
Entry point for running the CLI as a module.

Usage:
    python -m recall.cli advance 5
    python -m recall.cli dashboard notes.json
    python -m recall.cli --help
"""
from .main import main

if __name__ == "__main__":
    main()
