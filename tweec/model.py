# tweec/model.py
"""
Front-end interface model.

The Twee parser is an external collaborator.  Everything the issue
pipeline needs from it is described here:

* :class:`SourceContext`: a slice of one story file (or of anonymous
  story text) plus the derived start/end positions;
* :class:`ParseWarning` / :class:`ParseError` with their kinds;
* the :class:`CodeMap` protocol (file name ↔ id, file text, line table);
* :class:`Story` on success, :class:`ErrorList` on failure, and the
  :class:`ParserOutput` pair that also carries the warnings.

Offsets are indices into the file text.  Lines and columns are 1-based.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import (
    Dict,
    Iterable,
    Iterator,
    List,
    NamedTuple,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Union,
    runtime_checkable,
)


# ═════════════════════════════════════════════════════════════════════════
#  SOURCE POSITIONS
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, order=True)
class Position:
    """A 1-based line/column pair."""
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceContext:
    """
    A contiguous ``[start, end)`` range of a source text.

    ``file_name`` is ``None`` for text that did not come from a named
    file; such contexts still have positions but cannot be resolved
    through a :class:`CodeMap`.
    """
    file_name: Optional[str]
    text: str = field(repr=False)
    start: int = 0
    end: Optional[int] = None

    def __post_init__(self) -> None:
        if self.end is None:
            object.__setattr__(self, "end", len(self.text))
        if not 0 <= self.start <= self.end <= len(self.text):  # type: ignore[operator]
            raise ValueError(
                f"context range {self.start}..{self.end} outside text "
                f"of length {len(self.text)}"
            )

    @classmethod
    def from_text(cls, file_name: Optional[str], text: str) -> SourceContext:
        """Context covering the whole of *text*."""
        return cls(file_name, text, 0, len(text))

    def subcontext(self, start: int, end: int) -> SourceContext:
        """Context for ``[start, end)`` of the same text."""
        return SourceContext(self.file_name, self.text, start, end)

    @property
    def byte_range(self) -> Tuple[int, int]:
        return (self.start, self.end)  # type: ignore[return-value]

    @property
    def contents(self) -> str:
        return self.text[self.start:self.end]

    @property
    def start_position(self) -> Position:
        return _position_at(self.text, self.start)

    @property
    def end_position(self) -> Position:
        return _position_at(self.text, self.end)  # type: ignore[arg-type]

    def __str__(self) -> str:
        name = self.file_name if self.file_name is not None else "<story>"
        return f"{name}:{self.start_position}"


def _position_at(text: str, offset: int) -> Position:
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return Position(line, offset - line_start + 1)


def _located(context: Optional[SourceContext], message: str) -> str:
    if context is None:
        return message
    if context.file_name is None:
        return f"{context.start_position}: {message}"
    return f"{context.file_name}:{context.start_position}: {message}"


# ═════════════════════════════════════════════════════════════════════════
#  WARNING / ERROR KINDS
# ═════════════════════════════════════════════════════════════════════════

class _Kind(enum.Enum):
    """
    Shared behaviour of :class:`WarningKind` and :class:`ErrorKind`.

    Each member carries:
      • kind_name: stable kebab-case name used by ``--allow``/``--deny``
      • template : message text; ``{0}`` is replaced by the detail
    """

    def __init__(self, kind_name: str, template: str) -> None:
        self.kind_name = kind_name
        self.template = template

    @property
    def takes_detail(self) -> bool:
        return "{0}" in self.template

    def format(self, detail: Optional[str] = None) -> str:
        if self.takes_detail:
            return self.template.format(detail if detail is not None else "")
        return self.template

    @classmethod
    def from_name(cls, name: str):
        """Look a kind up by its stable name (case-sensitive)."""
        for member in cls:
            if member.kind_name == name:
                return member
        raise ValueError(f"unknown {cls.__name__} name: {name!r}")

    @classmethod
    def names(cls) -> List[str]:
        return [member.kind_name for member in cls]


class WarningKind(_Kind):
    ESCAPED_OPEN_SQUARE = ("escaped-open-square", "Escaped [ character in passage header")
    ESCAPED_CLOSE_SQUARE = ("escaped-close-square", "Escaped ] character in passage header")
    ESCAPED_OPEN_CURLY = ("escaped-open-curly", "Escaped { character in passage header")
    ESCAPED_CLOSE_CURLY = ("escaped-close-curly", "Escaped } character in passage header")
    JSON_ERROR = ("json-error", "Error encountered while parsing JSON: {0}")
    DUPLICATE_STORY_DATA = ("duplicate-story-data", "Multiple StoryData passages found")
    DUPLICATE_STORY_TITLE = ("duplicate-story-title", "Multiple StoryTitle passages found")
    DUPLICATE_PASSAGE_NAME = ("duplicate-passage-name", "Multiple passages named {0} found")
    MISSING_STORY_DATA = ("missing-story-data", "No StoryData passage found")
    MISSING_STORY_TITLE = ("missing-story-title", "No StoryTitle passage found")
    UNCLOSED_LINK = ("unclosed-link", "Unclosed link")
    WHITESPACE_IN_LINK = ("whitespace-in-link", "Link target contains leading or trailing whitespace")
    DEAD_LINK = ("dead-link", "Dead link to nonexistent passage: {0}")
    MISSING_START_PASSAGE = (
        "missing-start-passage",
        "No passage named Start found and no alternate start passage set in StoryData",
    )
    DEAD_START_PASSAGE = ("dead-start-passage", "Start passage set to {0}, but no such passage found")


class ErrorKind(_Kind):
    EMPTY_NAME = ("empty-name", "Passage header has an empty name")
    LEADING_WHITESPACE = ("leading-whitespace", "Passage header has leading whitespace")
    METADATA_BEFORE_TAGS = ("metadata-before-tags", "Passage metadata appears before tags")
    UNCLOSED_TAG = ("unclosed-tag", "Unclosed tag block in passage header")
    UNCLOSED_METADATA = ("unclosed-metadata", "Unclosed metadata block in passage header")
    UNESCAPED_OPEN_SQUARE = ("unescaped-open-square", "Unescaped [ character in passage name")
    UNESCAPED_CLOSE_SQUARE = ("unescaped-close-square", "Unescaped ] character in passage name")
    UNESCAPED_OPEN_CURLY = ("unescaped-open-curly", "Unescaped { character in passage name")
    UNESCAPED_CLOSE_CURLY = ("unescaped-close-curly", "Unescaped } character in passage name")
    MISSING_SIGIL = ("missing-sigil", "Passage header is missing the :: sigil")
    BAD_INPUT_PATH = ("bad-input-path", "Bad input path: {0}")


# ═════════════════════════════════════════════════════════════════════════
#  WARNINGS AND ERRORS
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ParseWarning:
    """A non-fatal defect found by the front-end."""
    kind: WarningKind
    detail: Optional[str] = None
    context: Optional[SourceContext] = None
    # Earlier definition a duplicate-style warning points back to.
    referent: Optional[SourceContext] = None

    @property
    def name(self) -> str:
        return self.kind.kind_name

    @property
    def message(self) -> str:
        return self.kind.format(self.detail)

    def get_referent(self) -> Optional[SourceContext]:
        """The referent, or ``None`` when there is no primary context."""
        if self.context is None:
            return None
        return self.referent

    def __str__(self) -> str:
        return _located(self.context, self.message)


@dataclass(frozen=True)
class ParseError:
    """A fatal defect found by the front-end."""
    kind: ErrorKind
    detail: Optional[str] = None
    context: Optional[SourceContext] = None

    @property
    def name(self) -> str:
        return self.kind.kind_name

    @property
    def message(self) -> str:
        return self.kind.format(self.detail)

    def __str__(self) -> str:
        return _located(self.context, self.message)


# ═════════════════════════════════════════════════════════════════════════
#  CODE MAP
# ═════════════════════════════════════════════════════════════════════════

@runtime_checkable
class CodeMap(Protocol):
    """The only view of the front-end's file table the pipeline uses."""

    def lookup_id(self, file_name: str) -> Optional[int]: ...

    def lookup_name(self, file_id: int) -> Optional[str]: ...

    def get_context(self, file_id: int) -> Optional[SourceContext]: ...

    def line_starts(self, file_id: int) -> Optional[Sequence[int]]: ...

    def line_range(self, file_id: int, line: int) -> Optional[Tuple[int, int]]:
        """Offsets of 1-based *line*, trailing newline included."""
        ...


class SourceCodeMap:
    """In-memory :class:`CodeMap` over a list of named texts."""

    def __init__(self, files: Iterable[Tuple[str, str]] = ()) -> None:
        self._ids: Dict[str, int] = {}
        self._contexts: List[SourceContext] = []
        self._line_starts: List[List[int]] = []
        for name, text in files:
            self.add(name, text)

    def add(self, file_name: str, text: str) -> int:
        """Register a file and return its id."""
        if file_name in self._ids:
            raise ValueError(f"duplicate file in code map: {file_name!r}")
        file_id = len(self._contexts)
        self._ids[file_name] = file_id
        self._contexts.append(SourceContext.from_text(file_name, text))
        starts = [0]
        starts.extend(i + 1 for i, ch in enumerate(text) if ch == "\n")
        self._line_starts.append(starts)
        return file_id

    def __len__(self) -> int:
        return len(self._contexts)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def _valid(self, file_id: int) -> bool:
        return 0 <= file_id < len(self._contexts)

    def lookup_id(self, file_name: str) -> Optional[int]:
        return self._ids.get(file_name)

    def lookup_name(self, file_id: int) -> Optional[str]:
        if not self._valid(file_id):
            return None
        return self._contexts[file_id].file_name

    def get_context(self, file_id: int) -> Optional[SourceContext]:
        if not self._valid(file_id):
            return None
        return self._contexts[file_id]

    def line_starts(self, file_id: int) -> Optional[Sequence[int]]:
        if not self._valid(file_id):
            return None
        return self._line_starts[file_id]

    def line_range(self, file_id: int, line: int) -> Optional[Tuple[int, int]]:
        if not self._valid(file_id):
            return None
        starts = self._line_starts[file_id]
        if not 1 <= line <= len(starts):
            return None
        start = starts[line - 1]
        end = starts[line] if line < len(starts) else len(self._contexts[file_id].text)
        return (start, end)


# ═════════════════════════════════════════════════════════════════════════
#  PARSE RESULTS
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Passage:
    name: str
    tags: Tuple[str, ...] = ()
    content: str = ""
    context: Optional[SourceContext] = None


@dataclass
class Story:
    """A successfully parsed story."""
    code_map: CodeMap
    title: Optional[str] = None
    passages: Dict[str, Passage] = field(default_factory=dict)

    def passage_names(self) -> List[str]:
        return list(self.passages)


@dataclass
class ErrorList:
    """The failure side of a parse: every error plus the files read."""
    errors: List[ParseError]
    code_map: CodeMap


StoryResult = Union[Story, ErrorList]


class ParserOutput(NamedTuple):
    """A parse result together with the warnings found along the way."""
    result: StoryResult
    warnings: List[ParseWarning]

    def take(self) -> Tuple[StoryResult, List[ParseWarning]]:
        return self.result, list(self.warnings)


__all__ = [
    "Position",
    "SourceContext",
    "WarningKind",
    "ErrorKind",
    "ParseWarning",
    "ParseError",
    "CodeMap",
    "SourceCodeMap",
    "Passage",
    "Story",
    "ErrorList",
    "StoryResult",
    "ParserOutput",
]
