import os


def default_settings_module() -> str:
    """Settings module for servers started without DJANGO_SETTINGS_MODULE.

    ``BUILD_ENV=local`` (the development image) selects local settings,
    anything else production.
    """
    if os.environ.get("BUILD_ENV", "production").lower() == "local":
        return "config.settings.local"
    return "config.settings.production"


def configure() -> None:
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", default_settings_module())
