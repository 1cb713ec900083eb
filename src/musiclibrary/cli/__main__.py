#!/usr/bin/env python3
"""
CLI entry point for musiclibrary.cli module.

This allows running: python -m musiclibrary.cli
"""

from .main import cli

if __name__ == "__main__":
    cli()
