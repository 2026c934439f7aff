import json
import logging
import sys
import time
from typing import Union

# Extra attributes copied onto each JSON line when a log call passes them
CONTEXT_FIELDS = (
    "trace_id", "job", "user_id", "video_id", "comment_id", "target",
    "liked", "following", "limit", "offset", "dry_run", "rows", "corrected",
    "latency_ms", "error", "error_type",
)


class JsonFormatter(logging.Formatter):
    """JSON line formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON line"""
        line = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                line[field] = getattr(record, field)

        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)

        # ids and counters may arrive as non-JSON types (UUID, Decimal)
        return json.dumps(line, ensure_ascii=False, default=str)


def setup_json_logging(level: Union[int, str] = logging.INFO) -> None:
    """Route every logger through one stdout handler emitting JSON lines"""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    logging.info("JSON logging initialized", extra={"trace_id": "system_init"})
