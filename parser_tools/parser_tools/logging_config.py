"""Logging setup for applications embedding the extraction engine.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
installed by the host through :func:`configure_logging`.  With
``PARSER_TOOLS_STRUCTURED_LOGGING=true`` each record is emitted as one JSON
line::

    {
        "timestamp": "2025-05-15T12:34:56.789012+00:00",
        "level": "DEBUG",
        "logger": "parser_tools.extraction.splitter",
        "message": "Discarding unparsable SQL (12 chars): ...",
        "sql_preview": "SELEC * FRM;",   // present when the record carries it
        "exc_info": "Traceback ..."      // present only on exceptions
    }
"""

from __future__ import annotations

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any

from parser_tools.config import Settings, load_settings

_PLAIN_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Render *record* as a single JSON line."""
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Emitted by the splitter via ``extra={"sql_preview": ...}``.
        sql_preview = getattr(record, "sql_preview", None)
        if sql_preview is not None:
            payload["sql_preview"] = sql_preview

        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_info"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(settings: Settings | None = None) -> logging.Handler:
    """Install a single root handler according to *settings*.

    Returns the installed handler so callers (and tests) can detach it.
    """
    if settings is None:
        settings = load_settings()

    handler = logging.StreamHandler()
    if settings.structured_logging:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.effective_log_level)
    return handler
