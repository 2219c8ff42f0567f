from functools import partial

from django.db import transaction

from roadside.realtime.events.notifications import publish_notification_created


def publish_on_create(sender, instance, created, raw=False, **kwargs):
    """Push new notifications to the recipient once the row is committed."""
    if created and not raw:
        transaction.on_commit(partial(publish_notification_created, instance))
