# tests/conftest.py
"""
Shared fixtures: a small Twee story held in a single code map, plus
factories for contexts, warnings, errors and configs.
"""

from typing import Optional

import pytest

from tweec.config import ColorChoice, Config
from tweec.model import (
    ErrorKind,
    ErrorList,
    ParseError,
    ParseWarning,
    Passage,
    SourceCodeMap,
    SourceContext,
    Story,
    WarningKind,
)

STORY_FILE = "story.twee"

STORY_TEXT = (
    ":: StoryTitle\n"                            # 1
    "Demo\n"                                     # 2
    "\n"                                         # 3
    ":: Start\n"                                 # 4
    "Go [[Satrt]] or [[ Home | Room 1 ]].\n"     # 5
    "\n"                                         # 6
    ":: Start\n"                                 # 7
    "Again.\n"                                   # 8
    "\n"                                         # 9
    ":: End\n"                                   # 10
    "The end.\n"                                 # 11
)

def context_of(text: str, needle: str, occurrence: int = 0,
               file_name: Optional[str] = STORY_FILE) -> SourceContext:
    """Context covering the *occurrence*-th appearance of *needle*."""
    start = -1
    for _ in range(occurrence + 1):
        start = text.index(needle, start + 1)
    return SourceContext(file_name, text, start, start + len(needle))

@pytest.fixture
def code_map():
    return SourceCodeMap([(STORY_FILE, STORY_TEXT)])

@pytest.fixture
def story(code_map):
    passages = {
        name: Passage(name=name, context=context_of(STORY_TEXT, f":: {name}"))
        for name in ("Start", "End")
    }
    return Story(code_map, "Demo", passages)

@pytest.fixture
def error_list(code_map):
    return ErrorList(
        [ParseError(ErrorKind.LEADING_WHITESPACE, context=context_of(STORY_TEXT, "Again"))],
        code_map,
    )

@pytest.fixture
def ctx():
    def make(needle: str, occurrence: int = 0, file_name: Optional[str] = STORY_FILE):
        return context_of(STORY_TEXT, needle, occurrence, file_name)
    return make

@pytest.fixture
def dead_link(ctx):
    return ParseWarning(WarningKind.DEAD_LINK, "Satrt", context=ctx("[[Satrt]]"))

@pytest.fixture
def spaced_link(ctx):
    return ParseWarning(WarningKind.WHITESPACE_IN_LINK, context=ctx("[[ Home | Room 1 ]]"))

@pytest.fixture
def duplicate_start(ctx):
    return ParseWarning(
        WarningKind.DUPLICATE_PASSAGE_NAME,
        "Start",
        context=ctx(":: Start", 1),
        referent=ctx(":: Start", 0),
    )

@pytest.fixture
def missing_data():
    return ParseWarning(WarningKind.MISSING_STORY_DATA)

@pytest.fixture
def config():
    def make(allowed=(), denied=(), compact=False):
        return Config(
            allowed=list(allowed),
            denied=list(denied),
            compact=compact,
            color=ColorChoice.NEVER,
        )
    return make
