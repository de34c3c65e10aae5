"""
mobihdr - MOBI E-book Header Inspector
======================================

This package decodes the leading binary headers of a MOBI e-book file
(the PalmDOC header and the MOBI header that follows it) into typed,
named fields, and reports their values.

It is meant for checking what a file actually contains without pulling
in a full e-book toolchain. Values are reported as found: an unknown
compression code or an identifier other than "MOBI" is shown, not
rejected. Only input too short to hold a header is an error.

Main Components
---------------
- **header**: Record layouts, decoders and reporting
- **cli**: The `mobihdr` command

Quick Start
-----------
Inspect a file:
    >>> from mobihdr import InspectConfig, inspect_file
    >>> report = inspect_file(InspectConfig(path="book.mobi"))
    >>> report.palm_header.get_compression_name()
    'PalmDOC'

Or use the command-line tool:
    $ mobihdr --filename book.mobi
    $ mobihdr --filename book.mobi --format json
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from mobihdr.errors import (
    MobiError,
    HeaderError,
    TruncatedInputError,
    TruncatedInput,
    SourceError,
    OpenError,
    CloseError,
)

from mobihdr.header import (
    ByteStream,
    Compression,
    DocType,
    TextEncoding,
    LocaleCode,
    INDEX_UNAVAILABLE,
    PALM_HEADER_SIZE,
    DOC_HEADER_SIZE,
    PalmHeader,
    DocHeader,
    PalmHeaderDecoder,
    DocHeaderDecoder,
    HeaderReport,
    InspectConfig,
    read_headers,
    inspect_file,
    format_report,
    report_to_dict,
)

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "MobiError",
    "HeaderError",
    "TruncatedInputError",
    "TruncatedInput",
    "SourceError",
    "OpenError",
    "CloseError",
    # Header decoding
    "ByteStream",
    "Compression",
    "DocType",
    "TextEncoding",
    "LocaleCode",
    "INDEX_UNAVAILABLE",
    "PALM_HEADER_SIZE",
    "DOC_HEADER_SIZE",
    "PalmHeader",
    "DocHeader",
    "PalmHeaderDecoder",
    "DocHeaderDecoder",
    "HeaderReport",
    "InspectConfig",
    "read_headers",
    "inspect_file",
    "format_report",
    "report_to_dict",
]
