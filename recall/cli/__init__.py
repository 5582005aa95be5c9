"""
Command line interface for recall-scheduler.
"""

from recall.cli.main import app, main

__all__ = ["app", "main"]
