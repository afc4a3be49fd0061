import os
import logging
import django
from django.core.wsgi import get_wsgi_application

logger = logging.getLogger(__name__)

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

try:
    django.setup()
    application = get_wsgi_application()
    logger.info("WSGI application loaded")
except Exception as e:
    logger.error(f"WSGI error: {e}")
    raise
