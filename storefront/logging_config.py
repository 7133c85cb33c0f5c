"""
Logging setup for the storefront API.

Plain text by default; ``LOG_FORMAT=json`` switches to one JSON object per
line so logs can be filtered with jq in containers.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

# Fields that handlers may attach through ``extra={...}``
_EXTRA_FIELDS = ("user_id", "product_id", "entry_id", "quantity", "client", "path", "status_code")


class JSONFormatter(logging.Formatter):
    """Single-line JSON formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str, ensure_ascii=False)


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s"))

    root = logging.getLogger("storefront")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
