"""
MOBI Header Decoding
====================

This package decodes the two fixed-size records at the start of record 0
of a MOBI e-book: the PalmDOC header and the MOBI header.

This package provides:
- **ByteStream**: Forward-only "read exactly K bytes" wrapper
- **RecordLayout / FieldSpec**: Declarative field tables
- **PalmHeader / DocHeader**: Immutable decoded records
- **PalmHeaderDecoder / DocHeaderDecoder**: Stream decoders
- **inspect_file**: Open, decode and close in one call
- **format_report / report_to_dict**: Text and structured output

Quick Start
-----------
    >>> from mobihdr.header import InspectConfig, inspect_file, format_report
    >>> report = inspect_file(InspectConfig(path="book.mobi"))
    >>> print(format_report(report))

Not Covered
-----------
Text decompression (PalmDOC LZ77, HUFF/CDIC), EXTH metadata, index and
image records are not decoded.

Reference
---------
- MOBI format notes: https://wiki.mobileread.com/wiki/MOBI
"""

from mobihdr.header.stream import ByteStream

from mobihdr.header.layout import (
    FieldSpec,
    FieldPosition,
    RecordLayout,
    LITTLE_ENDIAN,
    BIG_ENDIAN,
)

from mobihdr.header.records import (
    # Constants
    INDEX_UNAVAILABLE,
    EXTH_FLAG,
    MOBI_IDENTIFIER,
    PALM_HEADER_SIZE,
    DOC_HEADER_SIZE,
    PALM_HEADER_LAYOUT,
    DOC_HEADER_LAYOUT,
    is_index_available,
    # Enums
    Compression,
    DocType,
    TextEncoding,
    LocaleCode,
    # Records and decoders
    PalmHeader,
    DocHeader,
    PalmHeaderDecoder,
    DocHeaderDecoder,
)

from mobihdr.header.report import (
    HeaderReport,
    format_palm_header,
    format_doc_header,
    format_report,
    report_to_dict,
)

from mobihdr.header.pipeline import (
    InspectConfig,
    OUTPUT_FORMATS,
    read_headers,
    inspect_file,
)

__all__ = [
    # Stream
    "ByteStream",
    # Layout
    "FieldSpec",
    "FieldPosition",
    "RecordLayout",
    "LITTLE_ENDIAN",
    "BIG_ENDIAN",
    # Constants
    "INDEX_UNAVAILABLE",
    "EXTH_FLAG",
    "MOBI_IDENTIFIER",
    "PALM_HEADER_SIZE",
    "DOC_HEADER_SIZE",
    "PALM_HEADER_LAYOUT",
    "DOC_HEADER_LAYOUT",
    "is_index_available",
    # Enums
    "Compression",
    "DocType",
    "TextEncoding",
    "LocaleCode",
    # Records and decoders
    "PalmHeader",
    "DocHeader",
    "PalmHeaderDecoder",
    "DocHeaderDecoder",
    # Reporting
    "HeaderReport",
    "format_palm_header",
    "format_doc_header",
    "format_report",
    "report_to_dict",
    # Pipeline
    "InspectConfig",
    "OUTPUT_FORMATS",
    "read_headers",
    "inspect_file",
]
