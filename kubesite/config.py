"""Site-wide settings and logging setup.

Everything here is fixed at process start.  Deployment-specific values can be
overridden through ``KUBESITE_*`` environment variables.
"""

import logging.config
import os
from pathlib import Path

SITE_NAME = "Kubernetes Community"
SITE_URL = os.getenv("KUBESITE_SITE_URL", "https://managekubernetes.com")

# Where the runtime viewer fetches pre-rendered pages and markdown from
CONTENT_ORIGIN = os.getenv("KUBESITE_CONTENT_ORIGIN", "http://127.0.0.1:8000")

CONTENT_ROOT = Path(os.getenv("KUBESITE_CONTENT_ROOT", "public/content"))
OUTPUT_ROOT = Path(os.getenv("KUBESITE_OUTPUT_ROOT", "dist"))

# Used for datePublished / lastmod whenever an article carries no date of its own
CONTENT_DATE = os.getenv("KUBESITE_CONTENT_DATE", "2024-11-06T00:00:00Z")

LOG_LEVEL = os.getenv("KUBESITE_LOG_LEVEL", "INFO")

# Category slug -> display name, in build order
CATEGORIES = {
    "blog": "Blog",
    "learn": "Day-1 Basics",
    "ops": "Day-2 Operations",
}

# Landing-page anchor (or index page) each category breadcrumb points to
CATEGORY_PATHS = {
    "blog": "/blog",
    "learn": "/#day1",
    "ops": "/#day2",
}

DEFAULT_IMAGE = "/images/hero.svg"
LOGO_IMAGE = "/images/hero.svg"
IMAGE_WIDTH = 1200
IMAGE_HEIGHT = 630

TITLE_LIMIT = 55
META_DESCRIPTION_LIMIT = 160
OG_DESCRIPTION_LIMIT = 200

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
        },
    },
    "root": {"level": LOG_LEVEL, "handlers": ["console"]},
}


def configure_logging() -> None:
    logging.config.dictConfig(LOGGING_CONFIG)
