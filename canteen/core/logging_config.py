import logging
import logging.config
import os
from datetime import datetime
from canteen.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DETAILED_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# one rotating file per channel, kept under LOG_DIR/<channel>/
LOG_CHANNELS = {
    "app": (settings.LOG_LEVEL, "detailed"),
    "error": ("ERROR", "detailed"),
    "access": ("INFO", "access"),
    "ledger": ("INFO", "standard"),
    "ai": ("INFO", "detailed"),
}

# balance mutations and issuances are also written to the ledger channel
LEDGER_LOGGERS = (
    "canteen.services.hr.balance_ledger_service",
    "canteen.services.feeding.ticket_issuance_service",
    "canteen.utils.db_retry",
)


def _channel_handler(channel: str, log_dir: str, stamp: str) -> dict:
    level, formatter = LOG_CHANNELS[channel]
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": os.path.join(log_dir, channel, f"{channel}-{stamp}.log"),
        "maxBytes": 10 * 1024 * 1024,
        "backupCount": 10,
        "encoding": "utf-8",
    }


def _logger(level: str, *handlers: str) -> dict:
    return {"level": level, "handlers": list(handlers), "propagate": False}


def setup_logging():
    """Configure console output and the rotating per-channel log files"""

    log_dir = settings.LOG_DIR
    for channel in LOG_CHANNELS:
        os.makedirs(os.path.join(log_dir, channel), exist_ok=True)
    stamp = datetime.now().strftime("%Y-%m-%d")

    handlers = {f"{channel}_file": _channel_handler(channel, log_dir, stamp) for channel in LOG_CHANNELS}
    handlers["console"] = {
        "class": "logging.StreamHandler",
        "level": settings.LOG_LEVEL,
        "formatter": "standard",
        "stream": "ext://sys.stdout",
    }

    loggers = {
        "": _logger(settings.LOG_LEVEL, "console", "app_file", "error_file"),
        "canteen.ai": _logger("INFO", "console", "ai_file", "error_file"),
        "access": _logger("INFO", "access_file"),
        "uvicorn.access": _logger("INFO", "access_file"),
        "sqlalchemy.engine": _logger("INFO" if settings.DATABASE_ECHO else "WARNING", "app_file"),
    }
    for name in LEDGER_LOGGERS:
        loggers[name] = _logger(settings.LOG_LEVEL, "console", "app_file", "ledger_file", "error_file")

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
            "detailed": {"format": DETAILED_LOG_FORMAT, "datefmt": DATE_FORMAT},
            "access": {"format": "%(asctime)s - %(message)s", "datefmt": DATE_FORMAT},
        },
        "handlers": handlers,
        "loggers": loggers,
    })

    logger = logging.getLogger(__name__)
    logger.info(f"🍽️ Logging ready: level={settings.LOG_LEVEL} dir={log_dir}/ channels={', '.join(LOG_CHANNELS)}")
