#!/usr/bin/env python3
"""tweec/main.py: CLI entry-point for the tweec issue reporter.

Usage examples
--------------
    # Report every issue of a story, with source snippets
    python -m tweec story.dump.json

    # Fail on dead links, ignore escaped-character warnings, one line each
    python -m tweec story.dump.json -D dead-link -a escaped-open-square --compact

    # Treat every warning as an error, never colour
    tweec-lint story.dump.json --deny all --color never

Exit codes
----------
    0   No parse errors and no denied warnings.
    1   At least one parse error or denied warning was reported.
    2   Infrastructure failure (missing file, malformed dump, I/O error).
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, Sequence, TextIO

from tweec.config import Config, build_parser
from tweec.dump import load_dump
from tweec.errors import ConfigError, DumpError, LintFailed
from tweec.linter import lint
from tweec.render import ColorStream

_log = logging.getLogger("tweec")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_FAILED: int = 1
EXIT_INFRA: int = 2


def _configure_logging(verbosity: int) -> None:
    """Set up the ``tweec`` logger: 0 → WARNING, 1 → INFO, 2+ → DEBUG."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("tweec")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        root.addHandler(handler)


def run(config: Config, out: TextIO) -> int:
    """Lint every dump named in *config*; the worst outcome wins."""
    for name in config.unknown_names():
        _log.warning("unknown warning name %r in --allow/--deny", name)

    status = EXIT_OK
    for path in config.inputs:
        try:
            output = load_dump(path)
        except OSError as exc:
            _log.error("cannot read %s: %s", path, exc)
            return EXIT_INFRA
        except DumpError as exc:
            _log.error("malformed dump %s", exc)
            return EXIT_INFRA

        try:
            story = lint(output, config, ColorStream(out, config.color))
        except LintFailed as exc:
            out.write(f"{exc}\n")
            out.flush()
            status = EXIT_FAILED
            continue
        except OSError as exc:
            _log.error("failed to write report: %s", exc)
            return EXIT_INFRA
        _log.info("%s: %r passed (%d passage(s))", path, story.title, len(story.passages))
    return status


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the tweec CLI; returns the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        config = Config.from_namespace(args)
    except ConfigError as exc:
        _log.error("%s", exc)
        return EXIT_INFRA

    try:
        return run(config, sys.stdout)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
