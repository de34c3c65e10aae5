"""
Header Reporting
================

Renders decoded headers for people (an offset table) and for programs
(a JSON-ready dict). The formatter walks the record layouts field by
field, so every decoded field appears in the output and nothing depends
on dataclass repr().

Text output looks like:

    PalmDOC header (16 bytes)
      Offset        Hex         Dec  Field
      0x000 (  0)   0x0002        2  Compression: PalmDOC
      0x002 (  2)   0x0000        0  Reserved
      ...
"""

from dataclasses import dataclass
from typing import Any, Callable

from mobihdr.header.layout import FieldPosition, RecordLayout
from mobihdr.header.records import (
    PALM_HEADER_LAYOUT,
    DOC_HEADER_LAYOUT,
    Compression,
    DocHeader,
    DocType,
    EXTH_FLAG,
    LocaleCode,
    PalmHeader,
    TextEncoding,
    is_index_available,
)


@dataclass(frozen=True)
class HeaderReport:
    """
    Both decoded headers of one file, plus where they came from.

    Attributes:
        source: Path of the inspected file
        palm_header: Decoded PalmDOC header
        doc_header: Decoded MOBI header
        end_offset: Stream position after decoding, i.e. the offset of
            the first byte that was not read
    """
    source: str
    palm_header: PalmHeader
    doc_header: DocHeader
    end_offset: int = PALM_HEADER_LAYOUT.size + DOC_HEADER_LAYOUT.size


# =============================================================================
# Value Annotations
# =============================================================================

def _index_note(value: int) -> str:
    return "" if is_index_available(value) else "unavailable"


def _exth_note(value: int) -> str:
    return "EXTH present" if value & EXTH_FLAG else "no EXTH"


# Field name -> function producing the text shown after the description
_NOTES: dict[str, Callable[[int], str]] = {
    "compression": Compression.get_name,
    "doc_type": DocType.get_name,
    "text_encoding": TextEncoding.get_name,
    "locale_code": LocaleCode.get_name,
    "orthographic_index": _index_note,
    "inflection_index": _index_note,
    "index_names": _index_note,
    "index_keys": _index_note,
    "extra_index": _index_note,
    "first_image_index": _index_note,
    "drm_offset": _index_note,
    "exth_flags": _exth_note,
}


# =============================================================================
# Text Formatting
# =============================================================================

def _format_row(offset: int, width: int, value: Any, label: str) -> str:
    """Format one line of the offset table."""
    position = f"0x{offset:03X} ({offset:3d})"
    if isinstance(value, bytes):
        return f"  {position}   {value.hex():<19}  {label}"
    value = int(value)
    hex_value = f"0x{value:0{width * 2}X}"
    return f"  {position}   {hex_value:<10} {value:>10}  {label}"


def _format_record(layout: RecordLayout, record: Any) -> list[str]:
    lines = [
        f"{layout.name} ({layout.size} bytes)",
        "  Offset        Hex         Dec  Field",
    ]
    for position in layout.positions():
        lines.extend(_format_field(position, getattr(record, position.spec.name)))
    return lines


def _format_field(position: FieldPosition, value: Any) -> list[str]:
    spec = position.spec
    note = _NOTES.get(spec.name)

    if spec.is_array:
        rows = []
        for i, element in enumerate(value):
            label = f"{spec.description} [{i}]"
            if note and note(element):
                label = f"{label}: {note(element)}"
            rows.append(_format_row(
                position.offset + i * spec.element_size,
                spec.element_size,
                element,
                label,
            ))
        return rows

    label = spec.description
    if note and note(value):
        label = f"{label}: {note(value)}"
    return [_format_row(position.offset, spec.width, value, label)]


def format_palm_header(header: PalmHeader) -> list[str]:
    """Render every PalmDOC header field as a table line."""
    return _format_record(PALM_HEADER_LAYOUT, header)


def format_doc_header(header: DocHeader) -> list[str]:
    """
    Render every MOBI header field as a table line.

    The identifier row carries the character view; a trailing summary
    line repeats it with the EXTH and declared-length information.
    """
    lines = _format_record(DOC_HEADER_LAYOUT, header)
    lines.append("")
    lines.append(f"Identifier: {header.identifier_text!r}")
    if header.header_length != DOC_HEADER_LAYOUT.size:
        lines.append(
            f"Declared header length {header.header_length} bytes, "
            f"decoded {DOC_HEADER_LAYOUT.size}"
        )
    return lines


def format_report(report: HeaderReport) -> str:
    """Render a full report as text."""
    lines = [f"File: {report.source}", ""]
    lines.extend(format_palm_header(report.palm_header))
    lines.append("")
    lines.extend(format_doc_header(report.doc_header))
    return "\n".join(lines)


# =============================================================================
# Structured Output
# =============================================================================

def _record_to_dict(layout: RecordLayout, record: Any) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for position in layout.positions():
        value = getattr(record, position.spec.name)
        if isinstance(value, bytes):
            value = value.hex()
        elif isinstance(value, tuple):
            value = [int(v) for v in value]
        else:
            value = int(value)
        result[position.spec.name] = value
    return result


def report_to_dict(report: HeaderReport) -> dict[str, Any]:
    """
    Convert a report to plain JSON-compatible types.

    Byte arrays become lowercase hex strings; the identifier's character
    view and the names of enumerated values are added alongside the raw
    fields.
    """
    palm = _record_to_dict(PALM_HEADER_LAYOUT, report.palm_header)
    palm["compression_name"] = report.palm_header.get_compression_name()

    doc = _record_to_dict(DOC_HEADER_LAYOUT, report.doc_header)
    doc["identifier_text"] = report.doc_header.identifier_text
    doc["doc_type_name"] = DocType.get_name(report.doc_header.doc_type)
    doc["text_encoding_name"] = TextEncoding.get_name(report.doc_header.text_encoding)
    doc["has_exth"] = report.doc_header.has_exth

    return {
        "source": report.source,
        "palm_header": palm,
        "doc_header": doc,
    }
