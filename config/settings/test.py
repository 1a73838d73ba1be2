"""
With these settings, tests run faster.
"""

from .base import *  # noqa: F403
from .base import TEMPLATES
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="hJ4q0oYz8wV3kR6mT1cN5bX9sD2fG7aL0pE4uI8yQ3jK6nM1vB5zC9xW2tH7rF0d",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#test-runner
TEST_RUNNER = "django.test.runner.DiscoverRunner"

# DATABASES
# ------------------------------------------------------------------------------
DATABASES = {
    "default": env.db("DATABASE_URL", default="sqlite://:memory:"),
}
DATABASES["default"]["ATOMIC_REQUESTS"] = False

# PASSWORDS
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#password-hashers
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# DEBUGGING FOR TEMPLATES
# ------------------------------------------------------------------------------
TEMPLATES[0]["OPTIONS"]["debug"] = True  # type: ignore[index]

# Your stuff...
# ------------------------------------------------------------------------------
# Keep realtime fan-out in-process; tests never need a broker.
REDIS_URL = ""
# Tests seed explicitly through fixtures.
EVENT_AUTO_SEED = False
EVENT_ADMIN_PASSCODE = "0000"
