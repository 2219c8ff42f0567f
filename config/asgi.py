"""ASGI entry point: Socket.IO in front of the Django HTTP application.

Socket.IO answers both Engine.IO long-polling and WebSocket upgrades under
``settings.SOCKETIO_PATH``; every other request falls through to Django.
Run with e.g. ``uvicorn config.asgi:application``.
"""

from config.environment import configure

configure()

from django.conf import settings  # noqa: E402
from django.core.asgi import get_asgi_application  # noqa: E402

django_application = get_asgi_application()

# The realtime module touches models, so it is imported once apps are ready.
from socketio import ASGIApp  # noqa: E402

from roadside.realtime.socketio import sio  # noqa: E402

application = ASGIApp(
    sio,
    other_asgi_app=django_application,
    socketio_path=settings.SOCKETIO_PATH,
)
