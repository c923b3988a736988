# tweec/render.py
"""
Terminal output for the issue pipeline.

ColorStream
    The output stream together with its colour state.  Colour on/off is
    decided once from a :class:`~tweec.config.ColorChoice`; used as a
    context manager it resets colour and flushes on every way out.

Diagnostic / Label
    A rich diagnostic: severity, message, stable code, labelled source
    spans and notes.  Built by :func:`tweec.issue.report`.

emit
    Rust-style rendering of one :class:`Diagnostic`::

        warning[dead-link]: Dead link to nonexistent passage: Satrt
         --> story.twee:4:1
           |
         4 | [[Satrt]]
           | ^^^^^^^^^
           |
           = note: Found passage with similar name: "Start"
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, TextIO, Tuple

from termcolor import colored

from tweec.config import ColorChoice
from tweec.story_files import StoryFiles

_RESET = "\033[0m"


# ═════════════════════════════════════════════════════════════════════════
#  SEVERITY
# ═════════════════════════════════════════════════════════════════════════

class Severity(enum.Enum):
    """
    Each carries:
      • label: word used in compact output
      • color: termcolor colour name
    """

    ERROR = ("Error", "red")
    WARNING = ("Warning", "yellow")

    def __init__(self, label: str, color: str) -> None:
        self.label = label
        self.color = color

    @property
    def code_name(self) -> str:
        return self.label.lower()


# ═════════════════════════════════════════════════════════════════════════
#  COLOUR STREAM
# ═════════════════════════════════════════════════════════════════════════

class ColorStream:
    """
    A text stream plus colour state, owned by one render pass.

    Usage::

        with ColorStream(sys.stdout, ColorChoice.AUTO) as out:
            out.write(out.paint("Error", "red", ["bold"]))
        # colour reset and stream flushed here, even on error
    """

    def __init__(self, stream: TextIO, choice: ColorChoice = ColorChoice.NEVER) -> None:
        self._stream = stream
        self.choice = choice
        self.enabled = choice.enabled_for(stream)

    def __enter__(self) -> ColorStream:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        try:
            self.reset()
        finally:
            self.flush()

    def paint(self, text: str, color: Optional[str] = None, attrs: Optional[List[str]] = None) -> str:
        """*text* wrapped in colour escapes, followed by a reset."""
        if not self.enabled:
            return text
        return colored(text, color, attrs=attrs, force_color=True)

    def write(self, text: str) -> None:
        self._stream.write(text)

    def writeln(self, text: str = "") -> None:
        self._stream.write(text + "\n")

    def reset(self) -> None:
        if self.enabled:
            self._stream.write(_RESET)

    def flush(self) -> None:
        self._stream.flush()


# ═════════════════════════════════════════════════════════════════════════
#  DIAGNOSTICS
# ═════════════════════════════════════════════════════════════════════════

class LabelStyle(enum.Enum):
    PRIMARY = "^"
    SECONDARY = "-"


@dataclass(frozen=True)
class Label:
    """A labelled ``[start, end)`` range of one file."""
    style: LabelStyle
    file_id: int
    range: Tuple[int, int]
    message: str = ""

    @classmethod
    def primary(cls, file_id: int, range: Tuple[int, int], message: str = "") -> Label:
        return cls(LabelStyle.PRIMARY, file_id, range, message)

    @classmethod
    def secondary(cls, file_id: int, range: Tuple[int, int], message: str = "") -> Label:
        return cls(LabelStyle.SECONDARY, file_id, range, message)


@dataclass
class Diagnostic:
    severity: Severity
    message: str
    code: str
    labels: List[Label] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    def primary_label(self) -> Optional[Label]:
        for label in self.labels:
            if label.style is LabelStyle.PRIMARY:
                return label
        return None


# ═════════════════════════════════════════════════════════════════════════
#  RICH RENDERER
# ═════════════════════════════════════════════════════════════════════════

@dataclass
class _Snippet:
    """A label resolved against the story files."""
    label: Label
    file_name: str
    first_line: int   # 0-based
    last_line: int    # 0-based
    start_col: int    # 0-based, on first_line
    end_col: int      # 0-based exclusive, on last_line
    lines: List[str]  # text of first_line..last_line


def _resolve(files: StoryFiles, label: Label) -> Optional[_Snippet]:
    source = files.source(label.file_id)
    name = files.name(label.file_id)
    if source is None or name is None:
        return None
    start, end = label.range
    first = files.line_index(label.file_id, start)
    last = files.line_index(label.file_id, max(start, end - 1))
    if first is None or last is None:
        return None
    lines: List[str] = []
    for idx in range(first, last + 1):
        line_range = files.line_range(label.file_id, idx)
        if line_range is None:
            return None
        lines.append(source[line_range[0]:line_range[1]].rstrip("\r\n"))
    first_start = files.line_range(label.file_id, first)[0]  # type: ignore[index]
    last_start = files.line_range(label.file_id, last)[0]  # type: ignore[index]
    return _Snippet(
        label=label,
        file_name=name,
        first_line=first,
        last_line=last,
        start_col=start - first_start,
        end_col=end - last_start,
        lines=lines,
    )


def _marker_lines(snippet: _Snippet) -> List[Tuple[int, str, int, int]]:
    """(line number, text, marker start, marker width) for each shown line."""
    shown: List[Tuple[int, str, int, int]] = []
    count = len(snippet.lines)
    for offset, text in enumerate(snippet.lines):
        if count > 2 and 0 < offset < count - 1:
            continue
        begin = snippet.start_col if offset == 0 else 0
        finish = snippet.end_col if offset == count - 1 else len(text)
        shown.append((snippet.first_line + offset + 1, text, begin, max(finish - begin, 1)))
    return shown


def emit(stream: ColorStream, files: StoryFiles, diagnostic: Diagnostic) -> None:
    """Write *diagnostic* to *stream* in the rich format."""
    sev = diagnostic.severity
    lines: List[str] = []

    header = stream.paint(f"{sev.code_name}[{diagnostic.code}]", sev.color, ["bold"])
    lines.append(f"{header}{stream.paint(': ' + diagnostic.message, attrs=['bold'])}")

    snippets = [s for s in (_resolve(files, lbl) for lbl in diagnostic.labels) if s is not None]
    if snippets:
        gutter_w = max(len(str(s.last_line + 1)) for s in snippets) + 1
        pipe = stream.paint("|", "blue", ["bold"])
        blank = " " * gutter_w
        current_file: Optional[str] = None
        for snippet in snippets:
            arrow = "-->" if snippet.label.style is LabelStyle.PRIMARY else ":::"
            if snippet.file_name != current_file or arrow == "-->":
                location = f"{snippet.file_name}:{snippet.first_line + 1}:{snippet.start_col + 1}"
                lines.append(f"{blank[:-1]}{stream.paint(arrow, 'blue', ['bold'])} {location}")
                current_file = snippet.file_name
            lines.append(f"{blank} {pipe}")
            lines.extend(_snippet_lines(stream, snippet, sev, gutter_w, pipe))
        lines.append(f"{blank} {pipe}")
        note_indent = blank
    else:
        note_indent = " "

    for note in diagnostic.notes:
        lines.append(f"{note_indent} = {stream.paint('note', 'cyan', ['bold'])}: {note}")

    lines.append("")
    stream.write("\n".join(lines) + "\n")


def _snippet_lines(
    stream: ColorStream,
    snippet: _Snippet,
    severity: Severity,
    gutter_w: int,
    pipe: str,
) -> List[str]:
    result: List[str] = []
    primary = snippet.label.style is LabelStyle.PRIMARY
    color = severity.color if primary else "blue"
    shown = _marker_lines(snippet)
    for pos, (number, text, begin, width) in enumerate(shown):
        if pos == 1 and len(snippet.lines) > 2:
            result.append(f"{'...'.rjust(gutter_w)} {pipe}")
        result.append(f"{stream.paint(str(number).rjust(gutter_w), 'blue', ['bold'])} {pipe} {text}")
        marker = snippet.label.style.value * width
        if pos == len(shown) - 1 and snippet.label.message:
            marker = f"{marker} {snippet.label.message}"
        result.append(f"{' ' * gutter_w} {pipe} {' ' * begin}{stream.paint(marker, color, ['bold'])}")
    return result


def emit_all(stream: ColorStream, files: StoryFiles, diagnostics: Sequence[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        emit(stream, files, diagnostic)


__all__ = [
    "Severity",
    "ColorStream",
    "LabelStyle",
    "Label",
    "Diagnostic",
    "emit",
    "emit_all",
]
