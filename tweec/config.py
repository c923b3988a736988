# tweec/config.py
"""
Run configuration for the issue pipeline.

The pipeline itself only reads the merged ``allowed`` / ``denied`` name
lists and the ``compact`` switch; the remaining fields belong to the
command line (:mod:`tweec.main`).

Command-line flags
------------------
    -a, --allow NAME     ignore warnings named NAME (repeatable, wins over --deny)
    -D, --deny NAME      treat warnings named NAME as errors (repeatable)
    --compact            one line per issue, no source snippets
    --color WHEN         always | ansi | auto | never   (default: auto)
    -v, --verbose        more logging (-v info, -vv debug)

``all`` may be given to ``--allow`` or ``--deny`` to match every warning.
"""

from __future__ import annotations

import argparse
import enum
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, TextIO

from tweec import __version__
from tweec.errors import ConfigError
from tweec.model import WarningKind

ALL: str = "all"


class ColorChoice(enum.Enum):
    ALWAYS = "always"
    ANSI = "ansi"
    AUTO = "auto"
    NEVER = "never"

    @classmethod
    def from_string(cls, s: str) -> ColorChoice:
        """Parse a ``--color`` value; anything unrecognised means never."""
        s_low = s.strip().lower()
        for member in cls:
            if member.value == s_low:
                return member
        return cls.NEVER

    def enabled_for(self, stream: TextIO) -> bool:
        """Whether colour escapes should be written to *stream*."""
        if self in (ColorChoice.ALWAYS, ColorChoice.ANSI):
            return True
        if self is ColorChoice.AUTO:
            return hasattr(stream, "isatty") and stream.isatty()
        return False


@dataclass
class Config:
    inputs: List[str] = field(default_factory=list)
    allowed: List[str] = field(default_factory=list)
    denied: List[str] = field(default_factory=list)
    compact: bool = False
    color: ColorChoice = ColorChoice.AUTO
    verbose: int = 0

    @classmethod
    def from_namespace(cls, ns: argparse.Namespace) -> Config:
        config = cls(
            inputs=list(ns.inputs),
            allowed=list(ns.allow or []),
            denied=list(ns.deny or []),
            compact=bool(ns.compact),
            color=ColorChoice.from_string(ns.color),
            verbose=int(ns.verbose),
        )
        config.validate()
        return config

    @classmethod
    def from_args(cls, argv: Optional[Sequence[str]] = None) -> Config:
        return cls.from_namespace(build_parser().parse_args(argv))

    def validate(self) -> None:
        """Raise :class:`~tweec.errors.ConfigError` for unusable settings."""
        if not self.inputs:
            raise ConfigError("no input dumps given")
        for name in [*self.allowed, *self.denied]:
            if not name.strip():
                raise ConfigError("empty warning name in --allow/--deny")

    def unknown_names(self) -> List[str]:
        """Allow/deny names that match no warning kind."""
        known = set(WarningKind.names())
        known.add(ALL)
        seen: List[str] = []
        for name in [*self.allowed, *self.denied]:
            if name not in known and name not in seen:
                seen.append(name)
        return seen


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tweec-lint",
        description=(
            "Report the warnings and errors of a Twee story from a "
            "front-end dump, applying allow/deny policy."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-a", "--allow",
        action="append",
        metavar="NAME",
        help="Warning to ignore; 'all' ignores every warning. Overrides --deny.",
    )
    parser.add_argument(
        "-D", "--deny",
        action="append",
        metavar="NAME",
        help="Warning to treat as an error; 'all' denies every warning.",
    )
    parser.add_argument(
        "--compact",
        action="store_true",
        help="Print one line per issue without source snippets.",
    )
    parser.add_argument(
        "--color",
        choices=[c.value for c in ColorChoice],
        default=ColorChoice.AUTO.value,
        help="When to colour the output (default: auto).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        metavar="DUMP",
        help="Front-end dump file(s) to report on.",
    )
    return parser


__all__ = [
    "ALL",
    "ColorChoice",
    "Config",
    "build_parser",
]
