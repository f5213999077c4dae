"""joker - command-line client for shipping containers to remote daemons."""

__version__ = "0.1.0"
