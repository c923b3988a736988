# tweec/story_files.py
"""Adapts a parse result's code map for the diagnostic renderer."""

from __future__ import annotations

import logging
from bisect import bisect_left
from dataclasses import dataclass
from typing import List, Optional, Tuple

from tweec.model import CodeMap, ErrorList, SourceContext, Story, StoryResult

_log = logging.getLogger(__name__)


@dataclass
class StoryFiles:
    """
    File id → name / source / line lookups over a :class:`CodeMap`.

    ``passage_names`` is ``None`` when parsing failed: passage identity
    is not reliable then, so no dead-link suggestions are offered.
    """

    code_map: CodeMap
    passage_names: Optional[List[str]] = None

    @classmethod
    def from_result(cls, result: StoryResult) -> StoryFiles:
        if isinstance(result, Story):
            return cls(result.code_map, result.passage_names())
        if isinstance(result, ErrorList):
            _log.debug(
                "parse failed with %d error(s); passage names unavailable",
                len(result.errors),
            )
            return cls(result.code_map, None)
        raise TypeError(f"not a story result: {result!r}")

    def name(self, file_id: int) -> Optional[str]:
        return self.code_map.lookup_name(file_id)

    def source(self, file_id: int) -> Optional[str]:
        context = self.code_map.get_context(file_id)
        if context is None:
            return None
        return context.contents

    def lookup_id(self, file_name: str) -> Optional[int]:
        return self.code_map.lookup_id(file_name)

    def line_index(self, file_id: int, byte_index: int) -> Optional[int]:
        """0-based index of the line holding *byte_index*."""
        starts = self.code_map.line_starts(file_id)
        if starts is None:
            return None
        idx = bisect_left(starts, byte_index)
        if idx < len(starts) and starts[idx] == byte_index:
            return idx
        # Not a line start: it belongs to the preceding line.
        if idx == 0:
            return None
        return idx - 1

    def line_range(self, file_id: int, line_index: int) -> Optional[Tuple[int, int]]:
        return self.code_map.line_range(file_id, line_index + 1)

    def resolve(self, context: Optional[SourceContext]) -> Optional[Tuple[int, Tuple[int, int]]]:
        """``(file_id, range)`` for *context*, or ``None`` if it has no known file."""
        if context is None or context.file_name is None:
            return None
        file_id = self.lookup_id(context.file_name)
        if file_id is None:
            return None
        return file_id, context.byte_range
