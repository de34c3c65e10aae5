"""
MOBI Header Record Definitions
==============================

This module defines the two fixed-size records found at the start of
record 0 of a MOBI e-book, and the decoders that read them from a
ByteStream.

Record 0 Structure Overview
---------------------------
Record 0 of a MOBI file starts with:
1. PalmDOC Header (16 bytes): compression, text length, record counts
2. MOBI Header (168 bytes decoded): identifier "MOBI", header length,
   document type, text encoding, index section numbers, Huffman/CDIC
   tables, EXTH flags and DRM fields
3. (not decoded) EXTH metadata, full name, padding

PalmDOC Header
--------------
    Offset  Size    Description
    ------  ----    -----------
    0       2       Compression (1 = none, 2 = PalmDOC, 17480 = HUFF/CDIC)
    2       2       Reserved, always zero
    4       4       Uncompressed length of the document text
    8       2       Number of text records
    10      2       Maximum size of each text record (usually 4096)
    12      4       Current reading position in the uncompressed text

MOBI Header
-----------
See DOC_HEADER_LAYOUT below for the full field table. All index fields
hold a record (section) number, or INDEX_UNAVAILABLE when absent.

Byte Order
----------
Both records are decoded little-endian. Files in the wild commonly store
the MOBI header big-endian; the little-endian reading is kept so output
stays comparable with earlier dumps of the same files.

Decoding is purely positional: no decoded value changes how later bytes
are read. The MOBI header's own header_length field is reported but never
used to size the read.
"""

from dataclasses import dataclass, field, fields
from enum import IntEnum
from typing import Any, Optional
import logging

from mobihdr.errors import TruncatedInputError
from mobihdr.header.layout import FieldSpec, RecordLayout, LITTLE_ENDIAN
from mobihdr.header.stream import ByteStream

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Index fields hold this value when the index does not exist
INDEX_UNAVAILABLE = 0xFFFFFFFF

# Bit in exth_flags announcing an EXTH block after the MOBI header
EXTH_FLAG = 0x40

# Identifier expected at the start of the MOBI header
MOBI_IDENTIFIER = b"MOBI"

# Size of the opaque region between exth_flags and the DRM fields
UNKNOWN_BYTES_SIZE = 36

# Number of extra index section numbers
EXTRA_INDEX_COUNT = 6


def is_index_available(value: int) -> bool:
    """Check whether an index field holds a section number."""
    return value != INDEX_UNAVAILABLE


# =============================================================================
# Enumeration Types
# =============================================================================

class Compression(IntEnum):
    """Compression scheme of the text records (PalmDOC header offset 0)."""
    NONE = 1
    PALMDOC = 2
    HUFFMAN_CDIC = 17480    # "DH" as ASCII

    @classmethod
    def from_value(cls, value: int) -> Optional["Compression"]:
        """Return the matching member, or None for an unknown code."""
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def get_name(cls, value: int) -> str:
        """Get a human-readable name for a compression code."""
        names = {
            cls.NONE: "No compression",
            cls.PALMDOC: "PalmDOC",
            cls.HUFFMAN_CDIC: "Huffman/CDIC",
        }
        return names.get(value, f"Unknown ({value})")


class DocType(IntEnum):
    """
    Document type stored in the MOBI header.

    Values above 256 are used by periodicals and by the legacy
    non-book formats Mobipocket Reader could display.
    """
    MOBIPOCKET_BOOK = 2
    PALMDOC_BOOK = 3
    AUDIO = 4
    KINDLEGEN_MOBI = 232
    KINDLEGEN_KF8 = 248
    NEWS = 257
    NEWS_FEED = 258
    NEWS_MAGAZINE = 259
    # Published values; some older tools number PICS..HTML as 518..523
    PICS = 513
    WORD = 514
    XLS = 515
    PPT = 516
    TEXT = 517
    HTML = 518

    @classmethod
    def from_value(cls, value: int) -> Optional["DocType"]:
        """Return the matching member, or None for an unknown type."""
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def get_name(cls, value: int) -> str:
        names = {
            cls.MOBIPOCKET_BOOK: "Mobipocket Book",
            cls.PALMDOC_BOOK: "PalmDOC Book",
            cls.AUDIO: "Audio",
            cls.KINDLEGEN_MOBI: "Mobipocket (kindlegen)",
            cls.KINDLEGEN_KF8: "KF8 (kindlegen)",
            cls.NEWS: "News",
            cls.NEWS_FEED: "News Feed",
            cls.NEWS_MAGAZINE: "News Magazine",
            cls.PICS: "Pictures",
            cls.WORD: "Word",
            cls.XLS: "XLS",
            cls.PPT: "PPT",
            cls.TEXT: "Text",
            cls.HTML: "HTML",
        }
        return names.get(value, f"Unknown ({value})")


class TextEncoding(IntEnum):
    """Text encoding (Windows code page number) of the document text."""
    CP1252 = 1252
    UTF8 = 65001

    @classmethod
    def from_value(cls, value: int) -> Optional["TextEncoding"]:
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def get_name(cls, value: int) -> str:
        names = {
            cls.CP1252: "Windows-1252",
            cls.UTF8: "UTF-8",
        }
        return names.get(value, f"Unknown ({value})")

    @property
    def codec(self) -> str:
        """Python codec name for this encoding."""
        return "cp1252" if self is TextEncoding.CP1252 else "utf-8"


class LocaleCode(IntEnum):
    """Windows locale identifiers commonly found in locale_code."""
    US_ENGLISH = 1033
    UK_ENGLISH = 2057

    @classmethod
    def get_name(cls, value: int) -> str:
        names = {
            cls.US_ENGLISH: "English (US)",
            cls.UK_ENGLISH: "English (UK)",
        }
        return names.get(value, f"Locale {value}")


# =============================================================================
# Record Layouts
# =============================================================================

PALM_HEADER_LAYOUT = RecordLayout(
    "PalmDOC header",
    (
        FieldSpec("compression", "H", description="Compression"),
        FieldSpec("reserved", "H", description="Reserved"),
        FieldSpec("text_length", "I", description="Uncompressed text length"),
        FieldSpec("record_count", "H", description="Text record count"),
        FieldSpec("record_size", "H", description="Maximum text record size"),
        FieldSpec("current_position", "I", description="Current reading position"),
    ),
    byte_order=LITTLE_ENDIAN,
)

DOC_HEADER_LAYOUT = RecordLayout(
    "MOBI header",
    (
        FieldSpec("identifier", "4s", description="Identifier"),
        FieldSpec("header_length", "I", description="Header length"),
        FieldSpec("doc_type", "I", description="Document type"),
        FieldSpec("text_encoding", "I", description="Text encoding"),
        FieldSpec("unique_id", "I", description="Unique ID"),
        FieldSpec("file_version", "I", description="File version"),
        FieldSpec("orthographic_index", "I", description="Orthographic index"),
        FieldSpec("inflection_index", "I", description="Inflection index"),
        FieldSpec("index_names", "I", description="Index names"),
        FieldSpec("index_keys", "I", description="Index keys"),
        FieldSpec("extra_index", "I", count=EXTRA_INDEX_COUNT, description="Extra index"),
        FieldSpec("first_non_book_index", "I", description="First non-book record"),
        FieldSpec("full_name_offset", "I", description="Full name offset"),
        FieldSpec("full_name_length", "I", description="Full name length"),
        FieldSpec("locale_code", "I", description="Locale"),
        FieldSpec("input_language", "I", description="Input language"),
        FieldSpec("output_language", "I", description="Output language"),
        FieldSpec("min_version", "I", description="Minimum reader version"),
        FieldSpec("first_image_index", "I", description="First image record"),
        FieldSpec("huffman_record_offset", "I", description="Huffman record offset"),
        FieldSpec("huffman_record_count", "I", description="Huffman record count"),
        FieldSpec("huffman_table_offset", "I", description="Huffman table offset"),
        FieldSpec("huffman_table_length", "I", description="Huffman table length"),
        FieldSpec("exth_flags", "I", description="EXTH flags"),
        FieldSpec("unknown_bytes", f"{UNKNOWN_BYTES_SIZE}s", description="Unknown"),
        FieldSpec("drm_offset", "I", description="DRM offset"),
        FieldSpec("drm_count", "I", description="DRM count"),
        FieldSpec("drm_size", "I", description="DRM size"),
        FieldSpec("drm_flags", "I", description="DRM flags"),
    ),
    byte_order=LITTLE_ENDIAN,
)

PALM_HEADER_SIZE = PALM_HEADER_LAYOUT.size      # 16
DOC_HEADER_SIZE = DOC_HEADER_LAYOUT.size        # 168

# The four single index fields, in file order
SINGLE_INDEX_FIELDS = (
    "orthographic_index",
    "inflection_index",
    "index_names",
    "index_keys",
)


def _record_values(record: Any) -> dict[str, Any]:
    return {f.name: getattr(record, f.name) for f in fields(record)}


def _check_length(layout: RecordLayout, data: bytes) -> None:
    if len(data) < layout.size:
        raise TruncatedInputError(
            expected=layout.size, available=len(data), offset=0
        )


# =============================================================================
# PalmDOC Header
# =============================================================================

@dataclass(frozen=True)
class PalmHeader:
    """
    PalmDOC header (16 bytes at the start of record 0).

    Every field holds the raw integer read from the file. Unknown
    compression codes are kept as-is; use compression_type for the
    enum view.
    """
    compression: int = Compression.PALMDOC
    reserved: int = 0
    text_length: int = 0
    record_count: int = 0
    record_size: int = 4096
    current_position: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> "PalmHeader":
        """
        Deserialize a PalmDOC header from the first 16 bytes of data.

        Raises:
            TruncatedInputError: If data is shorter than 16 bytes
        """
        _check_length(PALM_HEADER_LAYOUT, data)
        return cls(**PALM_HEADER_LAYOUT.unpack(data[:PALM_HEADER_SIZE]))

    def to_bytes(self) -> bytes:
        """Serialize the PalmDOC header to 16 bytes."""
        return PALM_HEADER_LAYOUT.pack(_record_values(self))

    @property
    def compression_type(self) -> Optional[Compression]:
        return Compression.from_value(self.compression)

    def get_compression_name(self) -> str:
        return Compression.get_name(self.compression)


# =============================================================================
# MOBI Header
# =============================================================================

@dataclass(frozen=True)
class DocHeader:
    """
    MOBI header, decoded as a fixed 168-byte prefix.

    The Huffman fields are decoded whatever the compression is; they only
    mean something when the PalmDOC header says HUFF/CDIC. Index fields
    keep INDEX_UNAVAILABLE rather than mapping it to None, so a record
    re-encodes to the exact bytes it was decoded from.
    """
    identifier: bytes = MOBI_IDENTIFIER
    header_length: int = DOC_HEADER_LAYOUT.size
    doc_type: int = DocType.MOBIPOCKET_BOOK
    text_encoding: int = TextEncoding.UTF8
    unique_id: int = 0
    file_version: int = 6

    orthographic_index: int = INDEX_UNAVAILABLE
    inflection_index: int = INDEX_UNAVAILABLE
    index_names: int = INDEX_UNAVAILABLE
    index_keys: int = INDEX_UNAVAILABLE
    extra_index: tuple[int, ...] = (INDEX_UNAVAILABLE,) * EXTRA_INDEX_COUNT

    first_non_book_index: int = 0
    full_name_offset: int = 0
    full_name_length: int = 0
    locale_code: int = LocaleCode.US_ENGLISH
    input_language: int = 0
    output_language: int = 0
    min_version: int = 6
    first_image_index: int = INDEX_UNAVAILABLE

    huffman_record_offset: int = 0
    huffman_record_count: int = 0
    huffman_table_offset: int = 0
    huffman_table_length: int = 0
    exth_flags: int = 0
    unknown_bytes: bytes = field(
        default=bytes(UNKNOWN_BYTES_SIZE - 4) + b"\xff\xff\xff\xff",
        repr=False,
    )

    drm_offset: int = INDEX_UNAVAILABLE
    drm_count: int = 0
    drm_size: int = 0
    drm_flags: int = 0

    def __post_init__(self) -> None:
        """Check the fixed-length fields and normalise extra_index to a tuple."""
        if len(self.identifier) != 4:
            raise ValueError(
                f"identifier must be 4 bytes, got {len(self.identifier)}"
            )
        if len(self.unknown_bytes) != UNKNOWN_BYTES_SIZE:
            raise ValueError(
                f"unknown_bytes must be {UNKNOWN_BYTES_SIZE} bytes, "
                f"got {len(self.unknown_bytes)}"
            )
        if len(self.extra_index) != EXTRA_INDEX_COUNT:
            raise ValueError(
                f"extra_index must have {EXTRA_INDEX_COUNT} entries, "
                f"got {len(self.extra_index)}"
            )
        object.__setattr__(self, "extra_index", tuple(self.extra_index))

    @classmethod
    def from_bytes(cls, data: bytes) -> "DocHeader":
        """
        Deserialize a MOBI header from the first 168 bytes of data.

        Trailing bytes (the rest of a longer header, EXTH, full name)
        are ignored.

        Raises:
            TruncatedInputError: If data is shorter than 168 bytes
        """
        _check_length(DOC_HEADER_LAYOUT, data)
        return cls(**DOC_HEADER_LAYOUT.unpack(data[:DOC_HEADER_SIZE]))

    def to_bytes(self) -> bytes:
        """Serialize the decoded prefix back to 168 bytes."""
        return DOC_HEADER_LAYOUT.pack(_record_values(self))

    @property
    def identifier_text(self) -> str:
        """
        Identifier as characters, one per byte.

        Latin-1 maps every byte to the code point of the same value, so
        this never fails: b"\\x00\\x00\\x00\\x00" becomes four NUL characters.
        """
        return self.identifier.decode("latin-1")

    def has_mobi_identifier(self) -> bool:
        return self.identifier == MOBI_IDENTIFIER

    @property
    def has_exth(self) -> bool:
        """True when exth_flags announces an EXTH block."""
        return bool(self.exth_flags & EXTH_FLAG)

    @property
    def doc_type_enum(self) -> Optional[DocType]:
        return DocType.from_value(self.doc_type)

    @property
    def text_encoding_enum(self) -> Optional[TextEncoding]:
        return TextEncoding.from_value(self.text_encoding)

    def index_fields(self) -> dict[str, int]:
        """
        All ten index section numbers by name, in file order.

        The six extra indexes are named extra_index[0] .. extra_index[5].
        Values are returned raw: INDEX_UNAVAILABLE stays INDEX_UNAVAILABLE.
        """
        result = {name: getattr(self, name) for name in SINGLE_INDEX_FIELDS}
        for i, value in enumerate(self.extra_index):
            result[f"extra_index[{i}]"] = value
        return result

    def available_indexes(self) -> dict[str, int]:
        """Only the index fields that hold a section number."""
        return {
            name: value
            for name, value in self.index_fields().items()
            if is_index_available(value)
        }


# =============================================================================
# Decoders
# =============================================================================

class PalmHeaderDecoder:
    """
    Reads a PalmHeader from the current position of a ByteStream.

    Consumes exactly PALM_HEADER_SIZE bytes on success. On failure a
    TruncatedInputError naming the step is raised and no record is
    produced.
    """
    layout = PALM_HEADER_LAYOUT
    step = "reading PalmDOC header"

    def decode(self, stream: ByteStream) -> PalmHeader:
        start = stream.position
        try:
            data = stream.read_exact(self.layout.size)
        except TruncatedInputError as e:
            e.with_step(self.step)
            raise
        logger.debug(f"Decoded {self.layout.name} at offset {start} ({len(data)} bytes)")
        return PalmHeader.from_bytes(data)


class DocHeaderDecoder:
    """
    Reads a DocHeader from the current position of a ByteStream.

    The stream must already sit just past the PalmDOC header. Consumes
    exactly DOC_HEADER_SIZE bytes on success, whatever header_length says.
    """
    layout = DOC_HEADER_LAYOUT
    step = "reading MOBI header"

    def decode(self, stream: ByteStream) -> DocHeader:
        start = stream.position
        try:
            data = stream.read_exact(self.layout.size)
        except TruncatedInputError as e:
            e.with_step(self.step)
            raise
        header = DocHeader.from_bytes(data)
        logger.debug(
            f"Decoded {self.layout.name} at offset {start} ({len(data)} bytes, "
            f"declared length {header.header_length})"
        )
        return header
