"""WSGI entry point. Serves the HTTP API only; realtime needs ``config.asgi``."""

from django.core.wsgi import get_wsgi_application

from config.environment import configure

configure()

application = get_wsgi_application()
