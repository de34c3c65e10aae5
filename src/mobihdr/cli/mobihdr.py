"""
mobihdr - MOBI Header Inspector Command-Line Interface
======================================================

This module implements the command-line interface for dumping the
PalmDOC and MOBI headers of an e-book file.

Usage Examples
--------------
Dump both headers as an offset table:
    $ mobihdr --filename book.mobi

Structured output:
    $ mobihdr --filename book.mobi --format json

Show debug logging (offsets, open/close):
    $ mobihdr --filename book.mobi -v

Exit Codes
----------
    0   Both headers decoded and printed
    1   The file could not be opened, read or closed
    2   Missing or invalid arguments
    3   Unexpected internal error
"""

import json
import logging
from pathlib import Path

import click

from mobihdr import __version__
from mobihdr.cli.errors import handle_cli_exception
from mobihdr.header import (
    OUTPUT_FORMATS,
    InspectConfig,
    format_report,
    inspect_file,
    report_to_dict,
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.option(
    "-f", "--filename",
    type=click.Path(path_type=Path),
    required=True,
    help="MOBI file to inspect (required)",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="text",
    help="Output format: text or json (default: text)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose (debug) logging",
)
@click.version_option(version=__version__, prog_name="mobihdr")
def main(filename: Path, output_format: str, verbose: bool) -> None:
    """
    Dump the PalmDOC and MOBI headers of an e-book file.

    Every field of both headers is printed with its offset and value.
    Unusual values are reported, not rejected; only a file too short
    to hold the headers is an error.

    \b
    Examples:
      mobihdr --filename book.mobi
      mobihdr --filename book.mobi --format json
    """
    config = InspectConfig(
        path=filename,
        output_format=output_format,
        verbose=verbose,
    )
    setup_logging(config.verbose)
    logger.debug(f"Inspecting {config.path} ({config.output_format} output)")

    try:
        report = inspect_file(config)
    except Exception as e:
        handle_cli_exception(e, verbose=config.verbose)

    if config.output_format == "json":
        click.echo(json.dumps(report_to_dict(report), indent=2))
    else:
        click.echo(format_report(report))


if __name__ == "__main__":
    main()
