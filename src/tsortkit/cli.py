"""tsort: write a total ordering consistent with the partial ordering on input.

The input is a sequence of whitespace-separated pairs of items.  A pair of
different items ``a b`` means a comes before b; a pair of identical items
``c c`` only registers c.  Standard input is read when no file is given.

Example::

    $ printf 'a b c c f g e f h h\\n' | tsort
    a
    c
    e
    h
    b
    f
    g

Any ordering where a is before b and e before f before g is equally valid.
Cycles are broken and reported on standard error; the exit status is then 1.
"""

from __future__ import annotations

import argparse
import io
import logging
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TextIO

from .config import TsortConfig
from .errors import ConfigError, InputError
from .graph import Graph
from .ordering import OrderingResult, topological_ordering
from .parsing import parse_into

EXIT_OK = 0
EXIT_CYCLE = 1
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tsort",
        description="Topologically sort pairs of items, breaking and reporting cycles.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="Input file of whitespace-separated pairs. Reads stdin if omitted.",
    )
    parser.add_argument("--config", type=Path, help="YAML configuration file.")
    parser.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        type=str.upper,
        help="Override the configured log level.",
    )
    return parser


def read_input(path: str | None, stdin: TextIO) -> str:
    if path is None:
        return stdin.read()
    # Undecodable bytes survive as lone surrogates and are written back out
    # unchanged by streams opened with errors="surrogateescape".
    return Path(path).read_text(encoding="utf-8", errors="surrogateescape")


def write_results(
    results: Iterable[OrderingResult], stdout: TextIO, stderr: TextIO, prog: str = "tsort"
) -> bool:
    """Print ordered nodes to *stdout* and cycle reports to *stderr*.

    Returns True if any cycle was reported.
    """
    cycle_found = False
    for result in results:
        for node in result.nodes:
            stdout.write(f"{node}\n")
        if result.cycle is not None:
            stderr.write(f"{prog}: cycle in data\n")
            for node in result.cycle:
                stderr.write(f"{prog}: {node}\n")
            cycle_found = True
    return cycle_found


def load_config(args: argparse.Namespace) -> TsortConfig:
    cfg = TsortConfig.from_yaml(args.config) if args.config else TsortConfig.default()
    if args.log_level:
        cfg = cfg.with_log_level(args.log_level)
    return cfg


def run(
    stdin: TextIO,
    stdout: TextIO,
    stderr: TextIO,
    argv: Sequence[str] | None = None,
) -> int:
    """Run tsort against the given streams and return the exit status.

    Usage errors are reported by argparse on sys.stderr; their status (2) is
    returned like any other.
    """
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_USAGE
    prog = "tsort"
    try:
        cfg = load_config(args)
        prog = cfg.program
        cfg.configure_logging(stderr)

        text = read_input(args.file, stdin)
        graph = parse_into(text, Graph(dedupe_edges=cfg.dedupe_edges))
    except (ConfigError, InputError) as e:
        stderr.write(f"{prog}: {e}\n")
        return EXIT_FAILURE
    except UnicodeDecodeError as e:
        stderr.write(f"{prog}: {args.file or '-'}: {e.reason} at byte {e.start}\n")
        return EXIT_FAILURE
    except OSError as e:
        if e.filename is not None and e.strerror:
            stderr.write(f"{prog}: {e.filename}: {e.strerror}\n")
        else:
            stderr.write(f"{prog}: {e}\n")
        return EXIT_FAILURE

    logging.debug(f"Parsed {len(graph)} nodes")
    if write_results(topological_ordering(graph), stdout, stderr, prog):
        return EXIT_CYCLE
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> None:
    for stream in (sys.stdin, sys.stdout, sys.stderr):
        if isinstance(stream, io.TextIOWrapper):
            stream.reconfigure(errors="surrogateescape")
    raise SystemExit(run(sys.stdin, sys.stdout, sys.stderr, argv))


if __name__ == "__main__":
    main()
