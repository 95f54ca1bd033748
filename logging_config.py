# logging_config.py
"""
Logging setup for the rental engine.

Modules log through ``logging.getLogger(__name__)``; ``setup_logging`` is
called once by the application entry point.
"""
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

import config


class EngineJsonFormatter(JsonFormatter):
     """JSON formatter that stamps every record with time, level and logger name."""

     def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
          super().add_fields(log_record, record, message_dict)
          log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
          log_record["level"] = record.levelname
          log_record["logger"] = record.name
          if record.exc_info:
               log_record["exception"] = {
                    "type": record.exc_info[0].__name__,
                    "message": str(record.exc_info[1]),
                    "traceback": self.formatException(record.exc_info),
               }


def build_logging_config(level: str, fmt: str) -> Dict[str, Any]:
     formatter = "json" if fmt == "json" else "standard"
     return {
          "version": 1,
          "disable_existing_loggers": False,
          "formatters": {
               "standard": {
                    "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
               },
               "json": {
                    "()": EngineJsonFormatter,
                    "format": "%(timestamp)s %(level)s %(logger)s %(message)s",
               },
          },
          "handlers": {
               "console": {
                    "class": "logging.StreamHandler",
                    "formatter": formatter,
                    "stream": "ext://sys.stdout",
               },
          },
          "loggers": {
               "sqlalchemy.engine": {"level": "WARNING", "propagate": True},
               "uvicorn.access": {"level": "INFO", "propagate": True},
          },
          "root": {
               "level": level,
               "handlers": ["console"],
          },
     }


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
     logging.config.dictConfig(
          build_logging_config(level or config.LOG_LEVEL, fmt or config.LOG_FORMAT)
     )
