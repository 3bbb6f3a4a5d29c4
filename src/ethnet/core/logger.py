"""
Structured logging for discovery, mapping and cleanup events.

Every record is an event name plus a flat set of fields. Fields render as
``key=value`` pairs by default, or as a single JSON object per line when a
CI log collector is reading the output.

All loggers live under the ``ethnet`` namespace so an embedding test
harness can tune the package's verbosity with a single
``logging.getLogger("ethnet").setLevel(...)`` call.

Examples:
    ```python
    from ethnet.core.logger import Logger

    logger = Logger("mapper")
    logger.info("network_mapped", enclave="devnet", services=12)
    # Output: network_mapped enclave=devnet services=12

    enclave_logger = logger.bind(enclave="devnet")
    enclave_logger.info("cleanup_started")
    # Output: cleanup_started enclave=devnet
    ```
"""

from __future__ import annotations

import datetime
import json
import logging
from typing import Any, ClassVar


LOGGER_NAMESPACE = "ethnet"

_QUOTE_TRIGGERS = frozenset("=\"'")


def _truncate(value: Any, limit: int | None) -> Any:
    text = str(value)
    if not limit or len(text) <= limit:
        return value
    return f"{text[:limit]}...<truncated {len(text) - limit} chars>"


def _render_value(value: Any) -> str:
    text = str(value)
    needs_quotes = not text or any(ch.isspace() or ch in _QUOTE_TRIGGERS for ch in text)
    if not needs_quotes:
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = 1000,
    prefix: str = " ",
) -> str:
    """Render *kwargs* as ``key=value`` pairs joined by single spaces.

    Args:
        kwargs: Fields to render, in insertion order.
        max_value_length: Longer values are cut and tagged with the number
            of dropped characters. ``None`` keeps values whole.
        prefix: Prepended to a non-empty result.

    Returns:
        ``""`` for no fields, otherwise e.g. ``' enclave=devnet error="no such host"'``.
    """
    if not kwargs:
        return ""
    rendered = (
        f"{key}={_render_value(_truncate(value, max_value_length))}"
        for key, value in kwargs.items()
    )
    return prefix + " ".join(rendered)


class StructuredFormatter(logging.Formatter):
    """Root-handler formatter producing ``level logger message key=value...`` lines.

    Fields come from the ``structured_kv`` attribute that
    [Logger][ethnet.core.logger.Logger] attaches to its records; records from
    plain ``logging.getLogger()`` callers are rendered without fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        line += format_kv_pairs(getattr(record, "structured_kv", {}))
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class Logger:
    """Event logger whose keyword arguments become structured fields.

    Records go to the stdlib logger ``ethnet.<name>``. Context bound with
    [bind()][ethnet.core.logger.Logger.bind] is merged into every record;
    per-call keyword arguments win on key collisions.
    """

    _DEFAULT_MAX_VALUE_LENGTH: ClassVar[int] = 1000

    def __init__(
        self,
        name: str,
        *,
        json_output: bool = False,
        max_value_length: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        Args:
            name: Component name; the stdlib logger is ``ethnet.<name>``.
            json_output: Emit one JSON object per record instead of passing
                fields to [StructuredFormatter][ethnet.core.logger.StructuredFormatter].
            max_value_length: Per-field truncation limit, 1000 when omitted.
            context: Fields attached to every record.
        """
        self._name = name
        self._logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
        self._json_output = json_output
        self._max_value_length = (
            self._DEFAULT_MAX_VALUE_LENGTH if max_value_length is None else max_value_length
        )
        self._context: dict[str, Any] = dict(context or {})

    @property
    def name(self) -> str:
        return self._logger.name

    def bind(self, **context: Any) -> Logger:
        """Return a child logger with *context* merged into its bound fields."""
        return Logger(
            self._name,
            json_output=self._json_output,
            max_value_length=self._max_value_length,
            context={**self._context, **context},
        )

    def _as_json(self, event: str, level: int, fields: dict[str, Any]) -> str:
        return json.dumps(
            {
                "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
                "level": logging.getLevelName(level).lower(),
                "logger": self._logger.name,
                "message": event,
                **fields,
            },
            default=str,
        )

    def _log(
        self, level: int, event: str, kwargs: dict[str, Any], *, exc_info: bool = False
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        fields = {**self._context, **kwargs}
        if self._json_output:
            self._logger.log(level, self._as_json(event, level, fields), exc_info=exc_info)
            return
        extra: dict[str, Any] = {}
        if fields:
            limit = self._max_value_length
            extra["structured_kv"] = {k: _truncate(v, limit) for k, v in fields.items()}
        self._logger.log(level, event, extra=extra, exc_info=exc_info)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log at ERROR level with the active exception's traceback."""
        self._log(logging.ERROR, msg, kwargs, exc_info=True)
