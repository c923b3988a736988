# tweec/dump.py
"""
Loader for front-end dump files.

The Twee front-end writes what it found as one JSON document::

    {
      "title":    "My Story",
      "files":    {"story.twee": "<full text>"},
      "passages": [{"name": "Start", "tags": [], "file": "story.twee",
                    "start": 0, "end": 20}],
      "errors":   [{"kind": "empty-name", "context": {...}}],
      "warnings": [{"kind": "dead-link", "detail": "Satrt",
                    "context": {...}, "referent": {...}}]
    }

A context is ``{"file": name, "start": int, "end": int}``; without a
``file`` key it may carry the text itself as ``"text"``.  ``null`` (or a
missing key) is a story-level position.  Any ``errors`` make the result
an :class:`~tweec.model.ErrorList`; otherwise it is a
:class:`~tweec.model.Story`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from tweec.errors import DumpError
from tweec.model import (
    ErrorKind,
    ErrorList,
    ParseError,
    ParserOutput,
    ParseWarning,
    Passage,
    SourceCodeMap,
    SourceContext,
    Story,
    WarningKind,
)

_log = logging.getLogger(__name__)


def load_dump(path: Union[str, Path]) -> ParserOutput:
    """Read and parse the dump at *path*.  ``OSError`` propagates."""
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DumpError(f"invalid JSON: {exc}", source=p) from exc
    return parse_dump(document, source=p)


def parse_dump(document: Any, source: Optional[Union[str, Path]] = None) -> ParserOutput:
    return _DumpReader(source).read(document)


class _DumpReader:
    def __init__(self, source: Optional[Union[str, Path]]) -> None:
        self.source = source
        self.code_map = SourceCodeMap()
        self.texts: Dict[str, str] = {}

    def fail(self, reason: str, key: Optional[str] = None) -> DumpError:
        return DumpError(reason, source=self.source, key=key)

    # ── top level ────────────────────────────────────────────────────

    def read(self, document: Any) -> ParserOutput:
        if not isinstance(document, Mapping):
            raise self.fail("dump must be a JSON object")

        files = document.get("files", {})
        if not isinstance(files, Mapping):
            raise self.fail("expected an object of file name -> text", "files")
        for name, text in files.items():
            if not isinstance(text, str):
                raise self.fail("file text must be a string", f"files.{name}")
            self.code_map.add(name, text)
            self.texts[name] = text

        warnings = [
            self.warning(entry, f"warnings[{i}]")
            for i, entry in enumerate(self.array(document, "warnings"))
        ]
        errors = [
            self.error(entry, f"errors[{i}]")
            for i, entry in enumerate(self.array(document, "errors"))
        ]
        _log.debug(
            "dump %s: %d file(s), %d warning(s), %d error(s)",
            self.source or "<memory>", len(self.code_map), len(warnings), len(errors),
        )

        if errors:
            return ParserOutput(ErrorList(errors, self.code_map), warnings)

        passages: Dict[str, Passage] = {}
        for i, entry in enumerate(self.array(document, "passages")):
            passage = self.passage(entry, f"passages[{i}]")
            passages[passage.name] = passage
        title = document.get("title")
        if title is not None and not isinstance(title, str):
            raise self.fail("title must be a string", "title")
        return ParserOutput(Story(self.code_map, title, passages), warnings)

    def array(self, document: Mapping[str, Any], key: str) -> List[Any]:
        value = document.get(key, [])
        if value is None:
            return []
        if not isinstance(value, list):
            raise self.fail("expected an array", key)
        return value

    # ── entries ──────────────────────────────────────────────────────

    def warning(self, entry: Any, key: str) -> ParseWarning:
        entry = self.object(entry, key)
        kind = self.kind(WarningKind, entry, key)
        return ParseWarning(
            kind=kind,
            detail=self.detail(entry, key),
            context=self.context(entry.get("context"), f"{key}.context"),
            referent=self.context(entry.get("referent"), f"{key}.referent"),
        )

    def error(self, entry: Any, key: str) -> ParseError:
        entry = self.object(entry, key)
        kind = self.kind(ErrorKind, entry, key)
        return ParseError(
            kind=kind,
            detail=self.detail(entry, key),
            context=self.context(entry.get("context"), f"{key}.context"),
        )

    def passage(self, entry: Any, key: str) -> Passage:
        entry = self.object(entry, key)
        name = entry.get("name")
        if not isinstance(name, str):
            raise self.fail("passage name must be a string", f"{key}.name")
        tags = entry.get("tags") or []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise self.fail("tags must be an array of strings", f"{key}.tags")
        context = self.context(entry, key) if "start" in entry else None
        content = entry.get("content")
        if content is None:
            content = context.contents if context is not None else ""
        return Passage(name=name, tags=tuple(tags), content=str(content), context=context)

    def object(self, entry: Any, key: str) -> Mapping[str, Any]:
        if not isinstance(entry, Mapping):
            raise self.fail("expected an object", key)
        return entry

    def kind(self, kind_cls: Any, entry: Mapping[str, Any], key: str) -> Any:
        name = entry.get("kind")
        if not isinstance(name, str):
            raise self.fail("missing kind", f"{key}.kind")
        try:
            return kind_cls.from_name(name)
        except ValueError as exc:
            raise self.fail(str(exc), f"{key}.kind") from exc

    def detail(self, entry: Mapping[str, Any], key: str) -> Optional[str]:
        detail = entry.get("detail")
        if detail is not None and not isinstance(detail, str):
            raise self.fail("detail must be a string", f"{key}.detail")
        return detail

    def context(self, raw: Any, key: str) -> Optional[SourceContext]:
        if raw is None:
            return None
        raw = self.object(raw, key)
        file_name = raw.get("file")
        if file_name is not None:
            if file_name not in self.texts:
                raise self.fail(f"unknown file {file_name!r}", f"{key}.file")
            text = self.texts[file_name]
        else:
            text = raw.get("text", "")
            if not isinstance(text, str):
                raise self.fail("text must be a string", f"{key}.text")
        start = raw.get("start", 0)
        end = raw.get("end", len(text))
        if not isinstance(start, int) or not isinstance(end, int):
            raise self.fail("start/end must be integers", key)
        try:
            return SourceContext(file_name, text, start, end)
        except ValueError as exc:
            raise self.fail(str(exc), key) from exc


__all__ = [
    "load_dump",
    "parse_dump",
]
