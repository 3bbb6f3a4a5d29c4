"""
Log line filtering for running services.

Retrieving logs is the orchestrator's business; this module owns only the
filter configuration that callers pass along and the pure line filtering
applied to whatever the orchestrator returns.

Examples:
    ```python
    flt = LogFilter(lines=50, grep="error", exclude_regex=r"peer \\w+ dropped")
    recent_errors = flt.apply(lines)

    LogFilter.tail(100, grep="slot")    # last 100 lines containing "slot"
    LogFilter.follow_logs(grep="head")  # streaming, lines containing "head"
    ```
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


DEFAULT_TAIL_LINES = 100


class LogFilter(BaseModel):
    """Filters applied to service log lines.

    All text matching is case-insensitive unless ``case_sensitive`` is set.
    Regular expressions are compiled at construction, so an invalid pattern
    fails fast with a ``ValidationError``.
    """

    model_config = ConfigDict(frozen=True)

    lines: int = Field(default=0, ge=0, description="Keep only the last N lines (0 = all)")
    grep: str = Field(default="", description="Keep lines containing this text")
    since: float | None = Field(
        default=None, ge=0, description="Only logs newer than this many seconds"
    )
    follow: bool = Field(default=False, description="Stream new lines as they arrive")
    include_regex: str = Field(default="", description="Keep lines matching this pattern")
    exclude_regex: str = Field(default="", description="Drop lines matching this pattern")
    case_sensitive: bool = Field(default=False)

    _include: re.Pattern[str] | None = PrivateAttr(default=None)
    _exclude: re.Pattern[str] | None = PrivateAttr(default=None)

    @field_validator("include_regex", "exclude_regex")
    @classmethod
    def _check_regex(cls, v: str) -> str:
        if v:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"invalid regular expression {v!r}: {e}") from e
        return v

    def model_post_init(self, __context: object) -> None:
        flags = 0 if self.case_sensitive else re.IGNORECASE
        if self.include_regex:
            self._include = re.compile(self.include_regex, flags)
        if self.exclude_regex:
            self._exclude = re.compile(self.exclude_regex, flags)

    @classmethod
    def tail(cls, lines: int = DEFAULT_TAIL_LINES, grep: str = "") -> LogFilter:
        """Last *lines* lines, optionally restricted to those containing *grep*."""
        return cls(lines=lines, grep=grep)

    @classmethod
    def follow_logs(cls, grep: str = "") -> LogFilter:
        """Streaming filter, optionally restricted to lines containing *grep*."""
        return cls(follow=True, grep=grep)

    def matches(self, line: str) -> bool:
        """Whether *line* passes the grep, include, and exclude filters."""
        if self.grep:
            if self.case_sensitive:
                if self.grep not in line:
                    return False
            elif self.grep.casefold() not in line.casefold():
                return False
        if self._include is not None and self._include.search(line) is None:
            return False
        return self._exclude is None or self._exclude.search(line) is None

    def apply(self, lines: Iterable[str]) -> list[str]:
        """Return the matching lines, keeping only the last ``lines`` of them."""
        kept = [line for line in lines if self.matches(line)]
        if self.lines and len(kept) > self.lines:
            kept = kept[-self.lines :]
        return kept
