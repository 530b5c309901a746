"""Command line interface for bitbucket-backup."""

from .dispatcher import main

__all__ = ["main"]
