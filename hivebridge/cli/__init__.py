"""
HiveBridge command line tools.
"""

from .operator import cli, main

__all__ = ["cli", "main"]
