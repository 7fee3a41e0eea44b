"""Command-line interface for SealSetup."""

from .parser import CLI, main

__all__ = ["CLI", "main"]
