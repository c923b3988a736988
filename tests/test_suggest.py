# tests/test_suggest.py
"""Tests for the near-miss passage name and link repair heuristics."""

import pytest

from tweec.suggest import (
    dead_link_note,
    did_you_mean,
    link_target,
    repair_link,
    whitespace_link_note,
)


class TestDidYouMean:

    def test_transposed_letters(self):
        assert did_you_mean("Satrt", ["Start", "End"]) == ["Start"]

    def test_nothing_close(self):
        assert did_you_mean("Home", ["Hallway", "End"]) == []

    def test_best_match_first(self):
        result = did_you_mean("Start", ["Stat", "Star", "Start"])
        assert result[0] == "Start"
        assert set(result) == {"Stat", "Star", "Start"}

    def test_empty_candidates(self):
        assert did_you_mean("Start", []) == []


class TestDeadLinkNote:

    def test_suggests_closest(self):
        assert dead_link_note("Satrt", ["End", "Start"]) == (
            'Found passage with similar name: "Start"'
        )

    def test_no_names_known(self):
        assert dead_link_note("Satrt", None) is None

    def test_no_candidate(self):
        assert dead_link_note("Cellar", ["Start", "End"]) is None


class TestLinkTarget:

    @pytest.mark.parametrize("contents,target", [
        ("Go|There", "There"),
        ("a|b|c", "b|c"),
        ("There<-Go", "There"),
        ("Go->There", "There"),
        ("x->y<-z", "x->y"),
        ("a<-b|c", "c"),
        ("There", "There"),
    ])
    def test_precedence(self, contents, target):
        assert link_target(contents) == target


class TestRepairLink:

    def test_already_trimmed_target(self):
        assert repair_link("[[ Home |Room 1]]") == "[[ Home |Room 1]]"

    def test_pipe_target(self):
        assert repair_link("[[ Home | Room 1 ]]") == "[[ Home |Room 1]]"

    def test_reverse_arrow_target(self):
        assert repair_link("[[ Cellar<-Go down]]") == "[[Cellar<-Go down]]"

    def test_arrow_target(self):
        assert repair_link("[[Go up-> Attic ]]") == "[[Go up->Attic]]"

    def test_plain_target(self):
        assert repair_link("[[ Attic ]]") == "[[Attic]]"

    def test_note_text(self):
        assert whitespace_link_note("[[ Home | Room 1 ]]") == (
            "Try replacing [[ Home | Room 1 ]] with [[ Home |Room 1]]"
        )

    def test_note_for_truncated_link(self):
        assert whitespace_link_note("[[") is None
