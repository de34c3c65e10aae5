"""
Header Inspection Pipeline
==========================

Runs the two decoders over a file:

    open -> PalmHeaderDecoder -> DocHeaderDecoder -> close -> HeaderReport

Configuration is a single InspectConfig value built once by the caller
(normally the CLI) and passed in; nothing here reads global state.

Usage Examples
--------------
    >>> from mobihdr.header import InspectConfig, inspect_file
    >>> report = inspect_file(InspectConfig(path="book.mobi"))
    >>> report.doc_header.identifier_text
    'MOBI'

Decoding from memory:
    >>> from mobihdr.header import ByteStream, read_headers
    >>> palm, doc = read_headers(ByteStream.from_bytes(data))
"""

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union
import logging

from mobihdr.errors import CloseError, MobiError, OpenError
from mobihdr.header.records import (
    DocHeader,
    DocHeaderDecoder,
    PalmHeader,
    PalmHeaderDecoder,
    MOBI_IDENTIFIER,
)
from mobihdr.header.report import HeaderReport
from mobihdr.header.stream import ByteStream

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "json")


@dataclass(frozen=True)
class InspectConfig:
    """
    Options for one inspection run.

    Attributes:
        path: File to inspect
        output_format: "text" for the offset table, "json" for structured output
        verbose: Enable debug logging
    """
    path: Union[str, Path]
    output_format: str = "text"
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output format '{self.output_format}'. "
                f"Choose from: {', '.join(OUTPUT_FORMATS)}"
            )


def read_headers(stream: ByteStream) -> tuple[PalmHeader, DocHeader]:
    """
    Decode the PalmDOC header and then the MOBI header from stream.

    The MOBI header is only attempted once the PalmDOC header has been
    fully decoded. On success the stream sits exactly
    PALM_HEADER_SIZE + DOC_HEADER_SIZE bytes past where it started.

    Raises:
        TruncatedInputError: If either record is incomplete
    """
    palm_header = PalmHeaderDecoder().decode(stream)
    doc_header = DocHeaderDecoder().decode(stream)

    if not doc_header.has_mobi_identifier():
        logger.warning(
            f"Unexpected identifier {doc_header.identifier_text!r} "
            f"(expected {MOBI_IDENTIFIER.decode('ascii')!r})"
        )

    return palm_header, doc_header


def _close(handle: BinaryIO, path: Path) -> None:
    try:
        handle.close()
    except OSError as e:
        raise CloseError(f"{path}: {e}", step="closing") from e
    logger.debug(f"Closed {path}")


def inspect_file(config: InspectConfig) -> HeaderReport:
    """
    Open config.path, decode both headers and release the file.

    Raises:
        OpenError: If the file cannot be opened
        TruncatedInputError: If the file is too short for either header
        CloseError: If the file cannot be released after decoding
    """
    path = Path(config.path)

    try:
        handle = path.open("rb")
    except OSError as e:
        raise OpenError(f"{path}: {e.strerror or e}", step="opening") from e
    logger.debug(f"Opened {path}")

    stream = ByteStream(handle)
    try:
        palm_header, doc_header = read_headers(stream)
    except MobiError:
        # The decode failure is the error worth reporting
        try:
            handle.close()
        except OSError as close_error:
            logger.warning(f"Failed to close {path}: {close_error}")
        raise

    _close(handle, path)

    return HeaderReport(
        source=str(path),
        palm_header=palm_header,
        doc_header=doc_header,
        end_offset=stream.position,
    )
