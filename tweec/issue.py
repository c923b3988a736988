# tweec/issue.py
"""
Issues: parse errors and policy-classified warnings.

An :data:`Issue` is exactly one of

* :class:`ErrorIssue`  : a parse error; always fatal, never filtered;
* :class:`WarningIssue`: a warning that survived ``--allow``, with the
  ``denied`` flag fixed at classification time.

Every consumer below dispatches over both variants explicitly.

Pipeline
--------
    classify()       allow/deny policy → (issues, is_failure)
    sort_issues()    stable sort with compare_issues()
    report()         issue → rich Diagnostic (labels + suggestion notes)
    print_issue()    issue → one compact line
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from tweec.config import ALL, Config
from tweec.model import (
    ErrorList,
    ParseError,
    ParseWarning,
    SourceContext,
    StoryResult,
    WarningKind,
)
from tweec.render import ColorStream, Diagnostic, Label, Severity
from tweec.story_files import StoryFiles
from tweec.suggest import dead_link_note, whitespace_link_note

_log = logging.getLogger(__name__)

REFERENT_MESSAGE = "Previously defined here. Duplicate discarded."


@dataclass(frozen=True)
class ErrorIssue:
    error: ParseError


@dataclass(frozen=True)
class WarningIssue:
    warning: ParseWarning
    denied: bool = False


Issue = Union[ErrorIssue, WarningIssue]


def _not_an_issue(issue: object) -> TypeError:
    return TypeError(f"not an issue: {issue!r}")


# ═════════════════════════════════════════════════════════════════════════
#  ACCESSORS
# ═════════════════════════════════════════════════════════════════════════

def issue_name(issue: Issue) -> str:
    if isinstance(issue, ErrorIssue):
        return issue.error.name
    if isinstance(issue, WarningIssue):
        return issue.warning.name
    raise _not_an_issue(issue)


def issue_message(issue: Issue) -> str:
    if isinstance(issue, ErrorIssue):
        return issue.error.message
    if isinstance(issue, WarningIssue):
        return issue.warning.message
    raise _not_an_issue(issue)


def issue_context(issue: Issue) -> Optional[SourceContext]:
    if isinstance(issue, ErrorIssue):
        return issue.error.context
    if isinstance(issue, WarningIssue):
        return issue.warning.context
    raise _not_an_issue(issue)


def issue_referent(issue: Issue) -> Optional[SourceContext]:
    if isinstance(issue, ErrorIssue):
        return None
    if isinstance(issue, WarningIssue):
        return issue.warning.get_referent()
    raise _not_an_issue(issue)


def issue_severity(issue: Issue) -> Severity:
    """Errors and denied warnings are errors; everything else warns."""
    if isinstance(issue, ErrorIssue):
        return Severity.ERROR
    if isinstance(issue, WarningIssue):
        return Severity.ERROR if issue.denied else Severity.WARNING
    raise _not_an_issue(issue)


def issue_text(issue: Issue) -> str:
    if isinstance(issue, ErrorIssue):
        return str(issue.error)
    if isinstance(issue, WarningIssue):
        return str(issue.warning)
    raise _not_an_issue(issue)


# ═════════════════════════════════════════════════════════════════════════
#  CLASSIFICATION
# ═════════════════════════════════════════════════════════════════════════

def classify(
    story_result: StoryResult,
    warnings: Iterable[ParseWarning],
    config: Config,
) -> Tuple[List[Issue], bool]:
    """
    Apply the allow/deny policy of *config*.

    Allowed warnings are dropped (allow beats deny).  Denied warnings
    and every parse error make the run a failure.  Returns the issues in
    input order (warnings first, then errors) and the failure flag.
    """
    issues: List[Issue] = []
    is_failure = False

    allow_all = ALL in config.allowed
    deny_all = ALL in config.denied
    for warning in warnings:
        name = warning.name
        if allow_all or name in config.allowed:
            continue
        denied = deny_all or name in config.denied
        if denied:
            is_failure = True
        issues.append(WarningIssue(warning, denied))

    if isinstance(story_result, ErrorList):
        is_failure = True
        for error in story_result.errors:
            issues.append(ErrorIssue(error))

    _log.debug("classified %d issue(s), failure=%s", len(issues), is_failure)
    return issues, is_failure


# ═════════════════════════════════════════════════════════════════════════
#  ORDERING
# ═════════════════════════════════════════════════════════════════════════

def compare_issues(left: Issue, right: Issue) -> int:
    """
    Order two issues by primary source position.

    Story-level issues (no context) come first, then contexts without a
    file name, then everything else by ``(line, column)``.  Two issues
    that both lack a context (or both lack a file name) compare as
    "less" in either direction.
    """
    lctx = issue_context(left)
    rctx = issue_context(right)
    if lctx is None:
        return -1
    if rctx is None:
        return 1
    if lctx.file_name is None:
        return -1
    if rctx.file_name is None:
        return 1
    lpos = lctx.start_position
    rpos = rctx.start_position
    lkey = (lpos.line, lpos.column)
    rkey = (rpos.line, rpos.column)
    if lkey < rkey:
        return -1
    if lkey > rkey:
        return 1
    return 0


def sort_issues(issues: Iterable[Issue]) -> List[Issue]:
    return sorted(issues, key=functools.cmp_to_key(compare_issues))


def filter_and_sort_issues(
    story_result: StoryResult,
    warnings: Iterable[ParseWarning],
    config: Config,
) -> Tuple[List[Issue], bool]:
    issues, is_failure = classify(story_result, warnings, config)
    return sort_issues(issues), is_failure


# ═════════════════════════════════════════════════════════════════════════
#  RENDERING
# ═════════════════════════════════════════════════════════════════════════

def suggestion(issue: Issue, story_files: StoryFiles) -> Optional[str]:
    """Suggestion note for dead links and whitespace in links."""
    if isinstance(issue, ErrorIssue):
        return None
    if not isinstance(issue, WarningIssue):
        raise _not_an_issue(issue)
    warning = issue.warning
    if warning.kind is WarningKind.DEAD_LINK:
        if warning.detail is None:
            return None
        return dead_link_note(warning.detail, story_files.passage_names)
    if warning.kind is WarningKind.WHITESPACE_IN_LINK:
        if warning.context is None:
            return None
        return whitespace_link_note(warning.context.contents)
    return None


def report(issue: Issue, story_files: StoryFiles) -> Diagnostic:
    """
    Build the rich diagnostic for *issue*.

    Labels and notes are attached only when the primary context resolves
    to a known file; otherwise the diagnostic carries message and code.
    """
    diagnostic = Diagnostic(
        severity=issue_severity(issue),
        message=issue_message(issue),
        code=issue_name(issue),
    )

    primary = story_files.resolve(issue_context(issue))
    if primary is None:
        return diagnostic

    file_id, span = primary
    diagnostic.labels.append(Label.primary(file_id, span))

    referent = story_files.resolve(issue_referent(issue))
    if referent is not None:
        ref_id, ref_span = referent
        diagnostic.labels.append(Label.secondary(ref_id, ref_span, REFERENT_MESSAGE))

    note = suggestion(issue, story_files)
    if note is not None:
        diagnostic.notes.append(note)
    return diagnostic


def print_issue(issue: Issue, stream: ColorStream) -> None:
    """One compact line: coloured severity label, then the issue text."""
    severity = issue_severity(issue)
    stream.write(stream.paint(f"{severity.label}: ", severity.color, ["bold"]))
    stream.writeln(issue_text(issue))


__all__ = [
    "ErrorIssue",
    "WarningIssue",
    "Issue",
    "REFERENT_MESSAGE",
    "issue_name",
    "issue_message",
    "issue_context",
    "issue_referent",
    "issue_severity",
    "issue_text",
    "classify",
    "compare_issues",
    "sort_issues",
    "filter_and_sort_issues",
    "suggestion",
    "report",
    "print_issue",
]
