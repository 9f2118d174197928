#!/usr/bin/env python3
"""
lmcasm - Little Man Computer source decoder CLI

Usage:
    python lmcasm.py <input.lmc | -> [-o output] [--format listing|json|csv]
                                     [--verbose] [--quiet] [--log-file FILE]

Output format is auto-detected from the -o extension if --format is not given:
    .json      → JSON list of {name, code, operand}
    .csv       → CSV with a name,code,operand header
    anything   → listing (default)

Examples:
    python lmcasm.py countdown.lmc
    python lmcasm.py countdown.lmc -o countdown.json
    type prog.lmc | python lmcasm.py - --format csv
"""

import argparse
import csv
import io
import json
import logging
import os
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from lmc_assembler import __version__, read_source, str_to_instructions, format_listing, to_records
from lmc_assembler.decoder import DecodeError, Instruction

LOGGER_NAME = "lmc_assembler"

log = logging.getLogger(f"{LOGGER_NAME}.cli")


def setup_logging(
    level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure and return the package logger.

    Console output goes to stderr through rich so stdout stays clean for
    decoded output. With ``log_file`` everything (DEBUG+) is also written
    to that file.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)

    # ── Console handler: WARNING+ unless -v / -q ──
    ch = RichHandler(
        console=Console(stderr=True),
        level=console_level,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    logger.addHandler(ch)

    # ── File handler: captures everything ──
    if log_file:
        log_dir = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(log_dir, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(fh)

    return logger


def render(instructions: List[Instruction], out_format: str) -> str:
    """Render decoded instructions in the requested output format."""
    if out_format == 'json':
        return json.dumps(to_records(instructions), indent=2)
    if out_format == 'csv':
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=['name', 'code', 'operand'], lineterminator='\n')
        writer.writeheader()
        writer.writerows(to_records(instructions))
        return buf.getvalue().rstrip('\n')
    return format_listing(instructions)


def _detect_format(args) -> str:
    if args.format:
        return args.format
    if args.output:
        ext = os.path.splitext(args.output)[1].lower()
        if ext == '.json':
            return 'json'
        if ext == '.csv':
            return 'csv'
    return 'listing'


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        prog="lmcasm",
        description="Decode Little Man Computer assembly into instruction records",
    )
    parser.add_argument("input", help="Input LMC source file ('-' for stdin)")
    parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    parser.add_argument("--format", choices=["listing", "json", "csv"], default=None,
                        help="Output format (auto-detected from -o extension if not set)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log decoding details to stderr")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Only log errors")
    parser.add_argument("--log-file", help="Also write a DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"lmcasm {__version__}")

    args = parser.parse_args(argv)

    if args.quiet:
        console_level = logging.ERROR
    elif args.verbose:
        console_level = logging.DEBUG
    else:
        console_level = logging.WARNING
    setup_logging(console_level=console_level, log_file=args.log_file)

    # Read input
    try:
        if args.input == '-':
            source = sys.stdin.read()
        else:
            source = read_source(args.input)
    except FileNotFoundError:
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        sys.exit(1)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading {args.input}: {e}", file=sys.stderr)
        sys.exit(1)

    out_format = _detect_format(args)
    log.debug("Input: %s, format: %s", args.input, out_format)

    try:
        instructions = str_to_instructions(source)
        result = render(instructions, out_format)

        if args.output:
            with open(args.output, "w", encoding="utf-8", newline='') as f:
                f.write(result)
                f.write("\n")
            log.info("Wrote %d instructions to %s", len(instructions), args.output)
        else:
            print(result)

    except DecodeError as e:
        log.debug("Offending line: %r", e.line_text)
        print(f"Decode error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error writing {args.output}: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Internal error: {e}", file=sys.stderr)
        if args.verbose:
            log.exception("Unhandled exception")
        sys.exit(2)


if __name__ == "__main__":
    main()
