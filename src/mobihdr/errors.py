"""
mobihdr Error Hierarchy
=======================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from MobiError, allowing callers to catch every
package error with a single except clause if desired.

Exception Hierarchy
-------------------
MobiError (base)
├── HeaderError (header decoding)
│   └── TruncatedInputError - fewer bytes remain than a record requires
└── SourceError (byte source lifecycle)
    ├── OpenError - the input file could not be opened
    └── CloseError - the input file could not be released

Missing command-line arguments are reported by click itself
(click.UsageError) before any of these can be raised.

Design Philosophy
-----------------
Only structural problems are errors. A header whose values look odd
(unknown compression code, an identifier other than "MOBI", a declared
header length that disagrees with the decoded size) is still a header:
it is decoded and reported, never rejected.

Every exception records the step that failed so the CLI can print a
message such as:
    reading MOBI header: expected 168 bytes at offset 16, got 40
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class MobiError(Exception):
    """
    Base exception for all mobihdr errors.

    Attributes:
        message: The error description
        step: Name of the pipeline step that failed (optional)
    """

    def __init__(self, message: str, step: Optional[str] = None):
        self.message = message
        self.step = step
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Prefix the message with the failing step when one is known."""
        if self.step:
            return f"{self.step}: {self.message}"
        return self.message

    def with_step(self, step: str) -> "MobiError":
        """Record the failing step and refresh the formatted message."""
        self.step = step
        self.args = (self._format_message(),)
        return self


# =============================================================================
# Header Decoding Exceptions
# =============================================================================

class HeaderError(MobiError):
    """Base exception for header decoding errors."""
    pass


class TruncatedInputError(HeaderError):
    """
    The byte source ended before a fixed-size record was complete.

    No partial record is ever returned. The exception records how many
    bytes were wanted, how many were actually available, and the absolute
    offset the cursor reached, which is useful when inspecting a damaged
    file with a hex editor.

    Attributes:
        expected: Number of bytes the record needs
        available: Number of bytes that could be read
        offset: Absolute stream offset where the read started
    """

    def __init__(
        self,
        expected: int,
        available: int,
        offset: int,
        step: Optional[str] = None,
    ):
        self.expected = expected
        self.available = available
        self.offset = offset
        super().__init__(
            f"expected {expected} bytes at offset {offset}, got {available}",
            step=step,
        )

    @property
    def offset_reached(self) -> int:
        """Absolute offset of the last byte that could be read, plus one."""
        return self.offset + self.available


# Short name used throughout the design notes
TruncatedInput = TruncatedInputError


# =============================================================================
# Byte Source Exceptions
# =============================================================================

class SourceError(MobiError):
    """Base exception for opening and releasing the byte source."""
    pass


class OpenError(SourceError):
    """
    The input file could not be opened.

    Raised when:
    - The file does not exist
    - Permission denied
    - The path names a directory
    """
    pass


class CloseError(SourceError):
    """Releasing the input file failed after decoding finished."""
    pass
