import json
import logging
from datetime import datetime, timezone

from storefront.config import get_settings

# Identifiers services attach through `extra=` so log lines can be joined
# back to the order, customer or staff member they concern.
CONTEXT_FIELDS = ("order_id", "user_id", "staff_user_id", "checkout_key", "godown_id")


def record_context(record: logging.LogRecord) -> dict:
    context = {}
    for field in CONTEXT_FIELDS:
        value = getattr(record, field, None)
        if value is not None:
            context[field] = value
    return context


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(record_context(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


class ContextTextFormatter(logging.Formatter):
    """Plain-text lines with any context identifiers appended as key=value."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        suffix = " ".join("{}={}".format(key, value) for key, value in context.items())
        return "{} [{}]".format(line, suffix)


def setup_logging() -> None:
    settings = get_settings()
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler()
    if settings.LOG_JSON:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            ContextTextFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s - %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
    # SQL echo stays opt-in through DATABASE_ECHO, not the root level.
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DATABASE_ECHO else logging.WARNING
    )


__all__ = ["ContextTextFormatter", "JsonFormatter", "setup_logging"]
