"""
funlang Command-Line Interface
==============================

This package provides the command-line tools for funlang:

- **funcc**: funlang compiler

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["funcc"]
