"""
GovServe - Django Settings (Infrastructure Only)
================================================
Django hosts the ORM adapter. Pricing and lifecycle rules live in
engines.orders; their tunables are read from ORDER_PRICING.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("GOVSERVE_SECRET_KEY", "govserve-dev-key-replace-before-deployment")

DEBUG = os.environ.get("GOVSERVE_DEBUG", "1") == "1"

ALLOWED_HOSTS = []

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    # ── GovServe ──────────────────────────────────────────
    "adapters.django_orm",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# ── URL ───────────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("GOVSERVE_DB_PATH", BASE_DIR / "db.sqlite3"),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Order pricing rules ───────────────────────────────────────
# Keys map 1:1 onto core.config.rules.PricingRules.
ORDER_PRICING = {
    "currency": os.environ.get("GOVSERVE_CURRENCY", "EGP"),
    "fine_surcharge_minor": int(os.environ.get("GOVSERVE_FINE_SURCHARGE_MINOR", "1000")),
    "payment_tolerance_minor": int(os.environ.get("GOVSERVE_PAYMENT_TOLERANCE_MINOR", "0")),
    "payment_timeout_minutes": int(os.environ.get("GOVSERVE_PAYMENT_TIMEOUT_MINUTES", "30")),
    "promo_usage_retries": int(os.environ.get("GOVSERVE_PROMO_USAGE_RETRIES", "3")),
}

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "govserve": {
            "handlers": ["console"],
            "level": os.environ.get("GOVSERVE_LOG_LEVEL", "INFO"),
        },
    },
}
