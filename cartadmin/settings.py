"""
Django settings for the Circuit Cart admin.

Only forms and logging are used; there is no ORM database.
"""
import os

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "circuit-cart-admin-dev-key")
DEBUG = os.getenv("DJANGO_DEBUG", "0") == "1"

INSTALLED_APPS = []

DATABASES = {}

USE_I18N = False
USE_TZ = True
TIME_ZONE = "Asia/Kolkata"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "[{asctime}] {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "cartadmin": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": True,
        },
        "botocore": {
            "handlers": ["console"],
            "level": "WARNING",
        },
    },
}
