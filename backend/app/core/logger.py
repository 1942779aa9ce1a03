import logging
import json
import os
from logging.handlers import RotatingFileHandler
from datetime import datetime

from app.core.config import settings

CONTEXT_KEYS = (
    "request_id",
    "user_id",
    "field_id",
    "consultation_id",
    "path",
    "method",
    "status_code",
    "duration_ms",
)

def json_formatter(record):
    log = {
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "level": record.levelname,
        "service": settings.SERVICE_NAME,
        "logger": record.name,
        "message": record.getMessage(),
    }

    for key in CONTEXT_KEYS:
        if hasattr(record, key):
            log[key] = getattr(record, key)

    if record.exc_info:
        log["exception"] = logging.Formatter().formatException(record.exc_info)

    return json.dumps(log, default=str)

class JSONFormatter(logging.Formatter):
    def format(self, record):
        return json_formatter(record)

logger = logging.getLogger("orchard")
logger.setLevel(settings.LOG_LEVEL)

json_f = JSONFormatter()

console_handler = logging.StreamHandler()
console_handler.setLevel(settings.LOG_LEVEL)
console_handler.setFormatter(json_f)

if not logger.handlers:
    logger.addHandler(console_handler)

    # file logging is disabled when LOG_DIR is empty
    if settings.LOG_DIR:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(settings.LOG_DIR, "app.json.log"),
            maxBytes=5 * 1024 * 1024,
            backupCount=5
        )
        file_handler.setLevel(settings.LOG_LEVEL)
        file_handler.setFormatter(json_f)
        logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Child logger of ``orchard`` sharing its handlers."""
    return logger.getChild(name)
