"""
mobihdr Command-Line Interface
==============================

This package provides the `mobihdr` command, a Click-based tool that
prints the decoded PalmDOC and MOBI headers of an e-book file.
"""

__all__ = ["mobihdr"]
