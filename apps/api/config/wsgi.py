# PATH: apps/api/config/wsgi.py
# 감독 이벤트 채널(PROCTORING_EVENT_CHANNEL_ENABLED)은 프로세스마다 1개, 첫 요청 시 시작.
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "apps.api.config.settings.prod")

application = get_wsgi_application()
