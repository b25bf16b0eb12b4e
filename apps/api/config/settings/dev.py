from .base import *

DEBUG = True
ALLOWED_HOSTS = ["*"]

# 로컬: DB_NAME 없으면 SQLite (select_for_update 는 no-op, 동시성 검증은 Postgres 에서)
if not os.getenv("DB_NAME"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

INSTALLED_APPS += ["debug_toolbar"]
MIDDLEWARE.insert(0, "debug_toolbar.middleware.DebugToolbarMiddleware")
INTERNAL_IPS = ["127.0.0.1"]

# 감독 이벤트는 로컬에서 동기 처리 (응답에 live counters 확인)
PROCTORING_EVENT_CHANNEL_ENABLED = False

LOGGING["loggers"]["academy"]["level"] = "DEBUG"
LOGGING["loggers"]["apps"] = {"handlers": ["console"], "level": "DEBUG", "propagate": False}
