"""
Unit tests for logs module.

Tests:
- LogFilter defaults, validation and presets
- grep / include / exclude matching and case sensitivity
- apply() tail semantics
"""

import pytest
from pydantic import ValidationError

from ethnet.logs import DEFAULT_TAIL_LINES, LogFilter


LINES = [
    "INFO  Imported new chain segment number=1",
    "WARN  Peer 0xabc dropped",
    "ERROR Engine API call failed",
    "INFO  Imported new chain segment number=2",
    "error lowercase failure",
]


class TestDefaults:
    def test_passes_everything(self) -> None:
        flt = LogFilter()
        assert flt.apply(LINES) == LINES
        assert flt.follow is False
        assert flt.since is None

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            LogFilter().grep = "x"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs",
        [{"lines": -1}, {"since": -1.0}, {"include_regex": "("}, {"exclude_regex": "[a-"}],
    )
    def test_invalid(self, kwargs: dict) -> None:
        with pytest.raises(ValidationError):
            LogFilter(**kwargs)


class TestPresets:
    def test_tail(self) -> None:
        flt = LogFilter.tail()
        assert flt.lines == DEFAULT_TAIL_LINES
        assert flt.grep == ""
        assert flt.follow is False

    def test_tail_with_grep(self) -> None:
        flt = LogFilter.tail(2, grep="imported")
        assert flt.apply(LINES) == [LINES[0], LINES[3]]

    def test_follow_logs(self) -> None:
        flt = LogFilter.follow_logs(grep="error")
        assert flt.follow is True
        assert flt.lines == 0
        assert flt.grep == "error"


class TestMatching:
    def test_grep_case_insensitive(self) -> None:
        assert LogFilter(grep="error").apply(LINES) == [LINES[2], LINES[4]]

    def test_grep_case_sensitive(self) -> None:
        assert LogFilter(grep="error", case_sensitive=True).apply(LINES) == [LINES[4]]

    def test_include_regex(self) -> None:
        flt = LogFilter(include_regex=r"number=\d+")
        assert flt.apply(LINES) == [LINES[0], LINES[3]]

    def test_exclude_regex(self) -> None:
        flt = LogFilter(exclude_regex=r"^info")
        assert flt.apply(LINES) == [LINES[1], LINES[2], LINES[4]]

    def test_exclude_regex_case_sensitive(self) -> None:
        flt = LogFilter(exclude_regex=r"^info", case_sensitive=True)
        assert flt.apply(LINES) == LINES

    def test_filters_combine(self) -> None:
        flt = LogFilter(grep="imported", exclude_regex="number=1$")
        assert flt.apply(LINES) == [LINES[3]]

    def test_matches_single_line(self) -> None:
        flt = LogFilter(grep="peer")
        assert flt.matches(LINES[1]) is True
        assert flt.matches(LINES[0]) is False


class TestApply:
    def test_keeps_last_lines(self) -> None:
        assert LogFilter(lines=2).apply(LINES) == LINES[-2:]

    def test_lines_larger_than_input(self) -> None:
        assert LogFilter(lines=50).apply(LINES) == LINES

    def test_tail_after_filtering(self) -> None:
        assert LogFilter(lines=1, grep="error").apply(LINES) == [LINES[4]]

    def test_accepts_iterables(self) -> None:
        assert LogFilter(grep="peer").apply(iter(LINES)) == [LINES[1]]

    def test_empty_input(self) -> None:
        assert LogFilter(lines=5).apply([]) == []
