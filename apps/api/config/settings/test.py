# PATH: apps/api/config/settings/test.py
from .base import *

DEBUG = False
SECRET_KEY = "test-secret-key"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# 테스트는 동기 기록 (채널 테스트는 직접 생성)
PROCTORING_EVENT_CHANNEL_ENABLED = False

PROCTORING_POLICY = {
    "tab_switch_limit": 3,
    "window_switch_limit": 3,
    "visibility_limit": 5,
}

LOGGING["root"]["level"] = "WARNING"
