"""Settings for the pytest run (``--ds=config.settings.test``)."""

from .base import *  # noqa: F403
from .base import DATABASES
from .base import LOGGING
from .base import env

SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="Vq3yX9w0kHc1nB7tLr2mJd8sFz5aUe4pGo6iQh0yTb2xWc9vNl3kMs7rEa1dPf8u",
)
TEST_RUNNER = "django.test.runner.DiscoverRunner"

# DATABASES
# ------------------------------------------------------------------------------
# In-memory SQLite unless DATABASE_URL says otherwise.
DATABASES["default"] = env.db("DATABASE_URL", default="sqlite:///:memory:")
DATABASES["default"]["ATOMIC_REQUESTS"] = True
if DATABASES["default"]["ENGINE"].endswith("postgresql"):
    # template0 avoids collation version mismatches in containers
    DATABASES["default"].setdefault("TEST", {})["TEMPLATE"] = "template0"

# Fast hashing; passwords in tests are throwaway.
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

# CELERY
# ------------------------------------------------------------------------------
# The emergency fan-out runs inline, errors surface in the test.
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

# ROADSIDE
# ------------------------------------------------------------------------------
# Pinned so proximity scenarios do not depend on the environment.
ROADSIDE_DEFAULT_SEARCH_RADIUS_KM = 10.0
ROADSIDE_DISPATCH_BOX_DEGREES = 0.1

# LOGGING
# ------------------------------------------------------------------------------
# Let realtime records reach the root logger so caplog can see them.
LOGGING["loggers"]["roadside.realtime"]["propagate"] = True
