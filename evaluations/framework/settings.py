"""
Django settings - 영속화 어댑터(evaluations.apps.exams) 전용 최소 설정
"""
import os

BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

SECRET_KEY = os.getenv("SECRET_KEY", "evaluations-insecure-dev-key")
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "evaluations.apps.exams.apps.ExamsConfig",
]

DATABASES = {
    "default": {
        "ENGINE": os.getenv("DB_ENGINE", "django.db.backends.postgresql"),
        "NAME": os.getenv("DB_NAME", "evaluations"),
        "USER": os.getenv("DB_USER", ""),
        "PASSWORD": os.getenv("DB_PASSWORD", ""),
        "HOST": os.getenv("DB_HOST", ""),
        "PORT": os.getenv("DB_PORT", "5432"),
        "CONN_MAX_AGE": int(os.getenv("DB_CONN_MAX_AGE", "60")),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

USE_TZ = True
TIME_ZONE = "Asia/Seoul"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {"format": "%(asctime)s [%(levelname)s] %(name)s %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "default"},
    },
    "loggers": {
        "evaluations": {
            "handlers": ["console"],
            "level": os.getenv("EVALUATIONS_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
