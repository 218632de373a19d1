"""Command proxy that rewrites commands, condenses tool output and tracks token savings."""

__version__ = "0.1.0"