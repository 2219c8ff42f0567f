"""Celery app. Tasks live in ``roadside.<app>.tasks`` and are autodiscovered.

Only the emergency fan-out runs here today. Workers share Django's settings
and its logging configuration.
"""

from logging.config import dictConfig

from celery import Celery
from celery.signals import setup_logging

from config.environment import configure

configure()

app = Celery("roadside")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


@setup_logging.connect
def use_django_logging(**kwargs):
    from django.conf import settings  # noqa: PLC0415

    dictConfig(settings.LOGGING)
