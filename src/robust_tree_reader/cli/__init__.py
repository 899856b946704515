"""Command-line interface module for Robust Tree Reader.

This module provides the process-level driver that reads one listing file and
reports success or failure through the exit status.
"""

from .main import main

__all__ = ["main"]
