"""tweec: issue pipeline for the Twee v3 story compiler.

The parser front-end hands over a parse result and a list of warnings;
this package classifies them against the allow/deny policy, orders them
by source position and renders them either one line per issue or as
span-annotated diagnostics.

Submodules
----------
model
    Front-end interface types: ``SourceContext``, ``ParseWarning``,
    ``ParseError``, the ``CodeMap`` protocol, ``Story`` and ``ErrorList``.

issue
    The ``Issue`` sum type, the classifier, the ordering comparator and
    rich diagnostic construction.

story_files
    ``StoryFiles``: file id → name/source/line lookups for rendering.

suggest
    Near-miss passage names and whitespace-in-link repair.

render
    ``ColorStream`` plus the compact and rich renderers.

linter
    ``lint()``: the whole pipeline in one call.

config, dump, main
    Command-line configuration, the JSON dump loader and the CLI.

Usage
-----
Command-line::

    python -m tweec story.dump.json --deny dead-link --compact

Programmatic::

    from tweec.config import Config
    from tweec.dump import load_dump
    from tweec.linter import lint
    from tweec.render import ColorStream

    story = lint(load_dump("story.dump.json"), Config(), ColorStream(sys.stdout))
"""

from __future__ import annotations

__version__: str = "0.2.0"
__all__: list[str] = [
    "__version__",
    "config",
    "dump",
    "errors",
    "issue",
    "linter",
    "model",
    "render",
    "story_files",
    "suggest",
]
