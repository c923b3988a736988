# tweec/errors.py
"""
Exception types raised by the tweec issue pipeline.

Policy outcomes (denied warnings, parse errors) are *not* exceptions
while the pipeline runs: the classifier reports them through a boolean
and the renderer prints them.  Only the final verdict of
:func:`tweec.linter.lint` is turned into :class:`LintFailed`.

Hierarchy::

    TweecError
    ├── LintFailed     - the run produced errors or denied warnings
    ├── DumpError      - a front-end dump could not be understood
    └── ConfigError    - the command line asked for something impossible

``OSError`` raised while reading dumps or writing the report is never
wrapped; it propagates to the caller as-is.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class TweecError(Exception):
    """Base exception for all tweec errors."""


class LintFailed(TweecError):
    """
    Raised by :func:`tweec.linter.lint` when at least one parse error or
    denied warning was reported.
    """

    MESSAGE = "Failed due to previous errors"

    def __init__(self, issue_count: int = 0) -> None:
        super().__init__(self.MESSAGE)
        self.issue_count = issue_count


class DumpError(TweecError):
    """A front-end dump is malformed."""

    def __init__(
        self,
        reason: str,
        source: Optional[Union[str, Path]] = None,
        key: Optional[str] = None,
    ) -> None:
        self.reason = reason
        self.source = str(source) if source is not None else None
        self.key = key
        super().__init__(str(self))

    def __str__(self) -> str:
        where = self.source or "<dump>"
        if self.key:
            where = f"{where} [{self.key}]"
        return f"{where}: {self.reason}"


class ConfigError(TweecError):
    """Invalid command-line configuration."""


__all__ = [
    "TweecError",
    "LintFailed",
    "DumpError",
    "ConfigError",
]
