# tweec/linter.py
"""Lints a parsed story against a :class:`~tweec.config.Config`."""

from __future__ import annotations

import logging

from tweec import issue
from tweec.config import Config
from tweec.errors import LintFailed
from tweec.model import ParserOutput, Story
from tweec.render import ColorStream, Severity, emit
from tweec.story_files import StoryFiles

_log = logging.getLogger(__name__)


def lint(output: ParserOutput, config: Config, stream: ColorStream) -> Story:
    """
    Report every issue in *output* to *stream* and return the story.

    Warnings are ignored or promoted to errors as *config* says.  Raises
    :class:`~tweec.errors.LintFailed` when a parse error or a denied
    warning was reported.  Write errors propagate; the stream's colour
    is reset and flushed either way.
    """
    story_result, warnings = output.take()
    story_files = StoryFiles.from_result(story_result)

    issues, is_failure = issue.filter_and_sort_issues(story_result, warnings, config)

    with stream:
        if config.compact:
            for item in issues:
                issue.print_issue(item, stream)
        else:
            for item in issues:
                emit(stream, story_files, issue.report(item, story_files))

    _log.info(
        "%d issue(s) reported (%d error-level)",
        len(issues),
        sum(1 for item in issues if issue.issue_severity(item) is Severity.ERROR),
    )

    if is_failure:
        raise LintFailed(len(issues))
    assert isinstance(story_result, Story)
    return story_result
