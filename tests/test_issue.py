# tests/test_issue.py
"""
Tests for issue classification, ordering and rich diagnostic building.
"""

import io
import random

import pytest

from tweec.config import ColorChoice
from tweec.issue import (
    REFERENT_MESSAGE,
    ErrorIssue,
    WarningIssue,
    classify,
    compare_issues,
    filter_and_sort_issues,
    issue_name,
    issue_severity,
    print_issue,
    report,
    sort_issues,
)
from tweec.model import (
    ErrorKind,
    ParseError,
    ParseWarning,
    SourceContext,
    WarningKind,
)
from tweec.render import ColorStream, LabelStyle, Severity
from tweec.story_files import StoryFiles

from conftest import STORY_TEXT


@pytest.fixture
def warnings(dead_link, spaced_link, duplicate_start, missing_data):
    return [dead_link, spaced_link, duplicate_start, missing_data]


# ═════════════════════════════════════════════════════════════════════════
#  CLASSIFICATION
# ═════════════════════════════════════════════════════════════════════════

class TestClassify:

    def test_no_policy_keeps_everything_as_warnings(self, story, warnings, config):
        issues, failed = classify(story, warnings, config())
        assert not failed
        assert [i.warning for i in issues] == warnings
        assert all(isinstance(i, WarningIssue) and not i.denied for i in issues)

    def test_allowed_name_is_dropped(self, story, warnings, config):
        issues, failed = classify(story, warnings, config(allowed=["dead-link"]))
        assert "dead-link" not in [issue_name(i) for i in issues]
        assert len(issues) == len(warnings) - 1
        assert not failed

    def test_allow_all_drops_every_warning(self, story, warnings, config):
        issues, failed = classify(story, warnings, config(allowed=["all"], denied=["all"]))
        assert issues == []
        assert not failed

    def test_allow_beats_deny(self, story, dead_link, config):
        issues, failed = classify(
            story, [dead_link], config(allowed=["dead-link"], denied=["dead-link"])
        )
        assert issues == []
        assert not failed

    def test_denied_name_fails(self, story, warnings, config):
        issues, failed = classify(story, warnings, config(denied=["whitespace-in-link"]))
        assert failed
        denied = [issue_name(i) for i in issues if i.denied]
        assert denied == ["whitespace-in-link"]

    def test_deny_all(self, story, warnings, config):
        issues, failed = classify(story, warnings, config(denied=["all"]))
        assert failed
        assert len(issues) == len(warnings)
        assert all(i.denied for i in issues)

    def test_deny_unrelated_name_does_not_fail(self, story, dead_link, config):
        _, failed = classify(story, [dead_link], config(denied=["json-error"]))
        assert not failed

    @pytest.mark.parametrize("allowed,denied", [
        ([], []),
        (["all"], []),
        ([], ["all"]),
        (["all"], ["all"]),
        (["leading-whitespace"], []),
    ])
    def test_parse_errors_are_unfilterable(self, error_list, warnings, config, allowed, denied):
        issues, failed = classify(error_list, warnings, config(allowed=allowed, denied=denied))
        assert failed
        errors = [i.error for i in issues if isinstance(i, ErrorIssue)]
        assert errors == error_list.errors

    def test_errors_follow_warnings(self, error_list, dead_link, config):
        issues, _ = classify(error_list, [dead_link], config())
        assert isinstance(issues[0], WarningIssue)
        assert isinstance(issues[1], ErrorIssue)

    def test_idempotent(self, story, warnings, config):
        cfg = config(denied=["dead-link"])
        first = classify(story, warnings, cfg)
        second = classify(story, warnings, cfg)
        assert first == second

    def test_policy_is_not_mutated(self, story, warnings, config):
        cfg = config(allowed=["all"], denied=["dead-link"])
        classify(story, warnings, cfg)
        assert cfg.allowed == ["all"]
        assert cfg.denied == ["dead-link"]


class TestSeverity:

    def test_error_issue(self, error_list):
        assert issue_severity(ErrorIssue(error_list.errors[0])) is Severity.ERROR

    def test_denied_warning(self, dead_link):
        assert issue_severity(WarningIssue(dead_link, denied=True)) is Severity.ERROR

    def test_plain_warning(self, dead_link):
        assert issue_severity(WarningIssue(dead_link)) is Severity.WARNING

    def test_rejects_non_issue(self, dead_link):
        with pytest.raises(TypeError):
            issue_severity(dead_link)


# ═════════════════════════════════════════════════════════════════════════
#  ORDERING
# ═════════════════════════════════════════════════════════════════════════

def _issue_at(text, line, column, file_name="a.twee"):
    lines = text.split("\n")
    offset = sum(len(ln) + 1 for ln in lines[:line - 1]) + column - 1
    ctx = SourceContext(file_name, text, offset, offset + 1)
    return WarningIssue(ParseWarning(WarningKind.UNCLOSED_LINK, context=ctx))


ORDER_TEXT = "line one\nxxabc\n\n\nyline5\n"


class TestOrdering:

    def test_story_level_first_then_by_position(self):
        a = WarningIssue(ParseWarning(WarningKind.MISSING_STORY_TITLE))
        b = _issue_at(ORDER_TEXT, 2, 3)
        c = _issue_at(ORDER_TEXT, 5, 1)
        assert sort_issues([c, a, b]) == [a, b, c]

    def test_column_breaks_line_ties(self):
        first = _issue_at(ORDER_TEXT, 2, 1)
        second = _issue_at(ORDER_TEXT, 2, 4)
        assert sort_issues([second, first]) == [first, second]
        assert compare_issues(first, second) == -1
        assert compare_issues(second, first) == 1

    def test_equal_positions_keep_input_order(self):
        first = _issue_at(ORDER_TEXT, 2, 3)
        second = WarningIssue(first.warning, denied=True)
        assert compare_issues(first, second) == 0
        assert sort_issues([second, first]) == [second, first]

    def test_missing_file_name_sorts_before_named(self):
        anon = WarningIssue(ParseWarning(
            WarningKind.UNCLOSED_LINK, context=SourceContext(None, ORDER_TEXT, 20, 21)
        ))
        named = _issue_at(ORDER_TEXT, 1, 1)
        assert compare_issues(anon, named) == -1
        assert compare_issues(named, anon) == 1
        assert sort_issues([named, anon]) == [anon, named]

    def test_known_quirk_missing_contexts_are_less_both_ways(self):
        # Two story-level issues each report "less" than the other.
        x = WarningIssue(ParseWarning(WarningKind.MISSING_STORY_DATA))
        y = WarningIssue(ParseWarning(WarningKind.MISSING_STORY_TITLE))
        assert compare_issues(x, y) == -1
        assert compare_issues(y, x) == -1

    def test_known_quirk_missing_file_names_are_less_both_ways(self):
        x = WarningIssue(ParseWarning(
            WarningKind.UNCLOSED_LINK, context=SourceContext(None, "ab", 0, 1)))
        y = WarningIssue(ParseWarning(
            WarningKind.UNCLOSED_LINK, context=SourceContext(None, "ab", 1, 2)))
        assert compare_issues(x, y) == -1
        assert compare_issues(y, x) == -1

    def test_positioned_issues_sorted_regardless_of_input(self):
        positioned = [_issue_at(ORDER_TEXT, line, col)
                      for line, col in [(1, 1), (1, 5), (2, 2), (5, 1), (5, 3)]]
        shuffled = positioned[:]
        random.Random(7).shuffle(shuffled)
        assert sort_issues(shuffled) == positioned

    def test_filter_and_sort(self, story, warnings, missing_data, config):
        issues, failed = filter_and_sort_issues(story, warnings, config())
        assert not failed
        assert issues[0].warning is missing_data
        lines = [i.warning.context.start_position.line for i in issues[1:]]
        assert lines == sorted(lines)


# ═════════════════════════════════════════════════════════════════════════
#  RICH DIAGNOSTICS
# ═════════════════════════════════════════════════════════════════════════

class TestReport:

    def test_dead_link_with_suggestion(self, story, dead_link):
        files = StoryFiles.from_result(story)
        diag = report(WarningIssue(dead_link), files)
        assert diag.severity is Severity.WARNING
        assert diag.code == "dead-link"
        assert diag.message == "Dead link to nonexistent passage: Satrt"
        assert len(diag.labels) == 1
        label = diag.labels[0]
        assert label.style is LabelStyle.PRIMARY
        assert label.file_id == 0
        assert label.range == dead_link.context.byte_range
        assert diag.notes == ['Found passage with similar name: "Start"']

    def test_dead_link_after_failed_parse_has_no_suggestion(self, error_list, dead_link):
        files = StoryFiles.from_result(error_list)
        diag = report(WarningIssue(dead_link), files)
        assert len(diag.labels) == 1
        assert diag.notes == []

    def test_whitespace_in_link_suggestion(self, story, spaced_link):
        diag = report(WarningIssue(spaced_link, denied=True), StoryFiles.from_result(story))
        assert diag.severity is Severity.ERROR
        assert diag.notes == [
            "Try replacing [[ Home | Room 1 ]] with [[ Home |Room 1]]"
        ]

    def test_duplicate_has_secondary_label(self, story, duplicate_start):
        diag = report(WarningIssue(duplicate_start), StoryFiles.from_result(story))
        assert [lbl.style for lbl in diag.labels] == [LabelStyle.PRIMARY, LabelStyle.SECONDARY]
        secondary = diag.labels[1]
        assert secondary.message == REFERENT_MESSAGE
        assert secondary.range == duplicate_start.referent.byte_range

    def test_unresolvable_referent_is_skipped(self, story, ctx):
        warning = ParseWarning(
            WarningKind.DUPLICATE_PASSAGE_NAME, "Start",
            context=ctx(":: Start", 1),
            referent=SourceContext("elsewhere.twee", STORY_TEXT, 0, 2),
        )
        diag = report(WarningIssue(warning), StoryFiles.from_result(story))
        assert len(diag.labels) == 1

    def test_story_level_issue_has_no_labels(self, story, missing_data):
        diag = report(WarningIssue(missing_data), StoryFiles.from_result(story))
        assert diag.labels == []
        assert diag.notes == []
        assert diag.code == "missing-story-data"

    def test_unknown_file_has_no_labels_or_notes(self, story):
        warning = ParseWarning(
            WarningKind.DEAD_LINK, "Satrt",
            context=SourceContext("elsewhere.twee", "[[Satrt]]"),
        )
        diag = report(WarningIssue(warning), StoryFiles.from_result(story))
        assert diag.labels == []
        assert diag.notes == []

    def test_error_issue(self, error_list):
        diag = report(ErrorIssue(error_list.errors[0]), StoryFiles.from_result(error_list))
        assert diag.severity is Severity.ERROR
        assert diag.code == "leading-whitespace"
        assert len(diag.labels) == 1


class TestPrintIssue:

    def _render(self, issue):
        buf = io.StringIO()
        print_issue(issue, ColorStream(buf, ColorChoice.NEVER))
        return buf.getvalue()

    def test_warning_line(self, dead_link):
        assert self._render(WarningIssue(dead_link)) == (
            "Warning: story.twee:5:4: Dead link to nonexistent passage: Satrt\n"
        )

    def test_denied_warning_line(self, missing_data):
        assert self._render(WarningIssue(missing_data, denied=True)) == (
            "Error: No StoryData passage found\n"
        )

    def test_error_line(self):
        error = ParseError(ErrorKind.BAD_INPUT_PATH, "missing.twee")
        assert self._render(ErrorIssue(error)) == "Error: Bad input path: missing.twee\n"

    def test_coloured_label_is_reset(self, dead_link):
        buf = io.StringIO()
        print_issue(WarningIssue(dead_link), ColorStream(buf, ColorChoice.ALWAYS))
        out = buf.getvalue()
        assert out.startswith("\x1b[")
        _, _, rest = out.partition("Warning: ")
        assert rest.startswith("\x1b[0m")
        assert rest.endswith("Satrt\n")
