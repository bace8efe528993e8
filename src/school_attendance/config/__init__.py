"""Settings modules for the school attendance service, chosen by ``APP_ENV``."""

import os

_SETTINGS_BY_ENV = {
    "development": "development",
    "dev": "development",
    "production": "production",
    "prod": "production",
    "testing": "testing",
    "test": "testing",
}


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").strip().lower()
    try:
        name = _SETTINGS_BY_ENV[env]
    except KeyError:
        raise RuntimeError(
            f"Unknown APP_ENV {env!r}; expected one of {', '.join(sorted(_SETTINGS_BY_ENV))}"
        ) from None
    return f"{__name__}.{name}"
