#!/usr/bin/env python3
"""
Main entry point for the joker CLI.

Delegates to the UI layer in joker.ui.cli to keep the console script
mapping stable.
"""

from joker.ui.cli import run_app as joker


if __name__ == "__main__":
    joker()
