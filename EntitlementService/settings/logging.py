"""
Logging configuration for structured JSON logging.

Console output is JSON so it can be shipped to a log aggregator as-is.
"""

import sys

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "entitlement-service"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that tags every record with the service name and level."""

    def add_fields(self, log_record, record, message_dict):
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)
        log_record["service"] = SERVICE_NAME
        log_record["level"] = record.levelname


def get_logging_config(environment: str = "development", log_file: str = "") -> dict:
    """
    Get logging configuration for the application.

    Args:
        environment: Environment name (development, production, test)
        log_file: Optional path of a rotating log file

    Returns:
        Django logging configuration dictionary
    """
    log_level = "DEBUG" if environment == "development" else "INFO"
    handlers = ["console"]

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s %(pathname)s %(lineno)d",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": sys.stdout,
            },
        },
        "root": {
            "handlers": handlers,
            "level": log_level,
        },
        "loggers": {
            "django": {"handlers": handlers, "level": "INFO", "propagate": False},
            "django.request": {"handlers": handlers, "level": "WARNING", "propagate": False},
            "django.db.backends": {"handlers": handlers, "level": "WARNING", "propagate": False},
            "celery": {"handlers": handlers, "level": "INFO", "propagate": False},
        },
    }

    if log_file:
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "json",
            "filename": log_file,
            "maxBytes": 10485760,  # 10MB
            "backupCount": 10,
        }
        handlers.append("file")

    for app_logger in ("audit", "core", "api", "hosted_apps", "licenses", "downloads", "activations"):
        config["loggers"][app_logger] = {
            "handlers": handlers,
            "level": log_level,
            "propagate": False,
        }

    return config
