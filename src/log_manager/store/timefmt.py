# src/log_manager/store/timefmt.py

from __future__ import annotations

import logging
from datetime import datetime

from .errors import MalformedError

logger = logging.getLogger(__name__)

# The only format accepted from callers for due dates / schedule times.
INPUT_FORMAT = "%Y-%m-%d %H:%M:%S"


def now_local() -> datetime:
    return datetime.now().astimezone()


def parse_required(text: str, field: str) -> datetime:
    try:
        return datetime.strptime(text, INPUT_FORMAT)
    except (TypeError, ValueError) as e:
        raise MalformedError(field, text, str(e)) from e


def parse_optional(text: str | None) -> datetime | None:
    """Lenient variant for optional fields: unparsable text means "not set"."""
    if not text:
        return None
    try:
        return datetime.strptime(text, INPUT_FORMAT)
    except (TypeError, ValueError):
        logger.debug("Ignoring unparsable optional timestamp %r", text)
        return None
