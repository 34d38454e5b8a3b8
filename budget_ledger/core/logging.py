"""JSON logging for the ledger.

Every line is one JSON object. Ledger identifiers passed through ``extra``
(adjustment, allocation, financial year) become top-level keys next to the
request id; any other extras are nested under ``"extra"`` with credential-like
keys masked.
"""
import json
import logging
import sys
from datetime import datetime, timezone

from budget_ledger.core.config import settings

_MASK = "********"
_SENSITIVE_KEYS = ("password", "secret", "token", "authorization")
_LEDGER_KEYS = ("adjustment_id", "allocation_id", "to_allocation_id", "financial_year")
_RESERVED = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


def _mask(data: dict) -> dict:
    masked = {}
    for key, value in data.items():
        if any(s in key.lower() for s in _SENSITIVE_KEYS):
            masked[key] = _MASK
        elif isinstance(value, dict):
            masked[key] = _mask(value)
        else:
            masked[key] = value
    return masked


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        from budget_ledger.api.middleware.request_id import request_id_var
        request_id = request_id_var.get("")
        if request_id:
            entry["request_id"] = request_id

        extra = {k: v for k, v in record.__dict__.items() if k not in _RESERVED}
        for key in _LEDGER_KEYS:
            value = extra.pop(key, None)
            if value is not None:
                entry[key] = str(value)
        if extra:
            entry["extra"] = _mask(extra)

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str | None = None) -> None:
    """Send JSON lines to stdout at ``level`` (defaults to ``settings.log_level``)."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())
    root.handlers.clear()
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    # SQL echo is opt-in through DEBUG
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )
