"""
cli.py

    nsa2dna INPUT OUTPUT [--config FILE] [--table] [--no-echo] [--no-write] [-v]

Reads an NSA description, determinizes it and prints the DNA. The DNA is also
written to OUTPUT; a failed write is reported but does not fail the run.

Exit codes: 0 ok, 1 bad input or settings, 2 conversion aborted.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import ConfigError, load_settings
from .dna import determinize
from .nsa import NSAError, UnknownSymbolError
from .parser import NSAParseError, load_nsa
from .serializer import dump_dna_table, format_dna, write_dna
from .tree import CapacityExceededError

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="nsa2dna", description="Determinize a Streett-style NSA into a DNA")
    p.add_argument("input", help="Path to the NSA description")
    p.add_argument("output", help="Path the DNA is written to")
    p.add_argument("--config", help="TOML settings file")
    p.add_argument("--table", action="store_true", default=None,
                   help="Also print a summary table of the DNA")
    p.add_argument("--no-echo", dest="echo", action="store_false", default=None,
                   help="Do not print the DNA to stdout")
    p.add_argument("--no-write", dest="write_output", action="store_false", default=None,
                   help="Do not write the output file")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config).with_overrides(
            echo=args.echo, write_output=args.write_output, table=args.table)
    except ConfigError as ex:
        print(f"CONFIG ERROR: {ex}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        nsa = load_nsa(args.input)
    except (NSAParseError, NSAError, OSError) as ex:
        print(f"INPUT ERROR: {ex}", file=sys.stderr)
        return 1

    try:
        dna = determinize(nsa)
    except (UnknownSymbolError, CapacityExceededError) as ex:
        print(f"CONVERSION ERROR: {ex}", file=sys.stderr)
        return 2

    if settings.echo:
        print(format_dna(dna))
    if settings.table:
        print(dump_dna_table(dna))

    if settings.write_output:
        try:
            write_dna(dna, args.output)
        except OSError as ex:
            print(f"WRITE ERROR: {ex}", file=sys.stderr)
        else:
            logger.info("DNA written to %s", args.output)

    return 0
