"""
Test settings: in-memory SQLite, fast password hashing, fixed shop identity.
"""

from .base import *  # noqa: F403,F405

SECRET_KEY = "test-secret-key-not-for-production"

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
        "ATOMIC_REQUESTS": True,
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

SHOP_NAME = "Test Cloth Stores"
SHOP_ADDRESS = "1 Market Road, Test Town"
SHOP_PHONE = "+91 90000 00000"
SHOP_WEBSITE = "www.test-shop.example"
SHOP_CURRENCY_SYMBOL = "Rs."
PUBLIC_BASE_URL = "http://shop.test"

LOGGING["root"]["level"] = "WARNING"  # noqa: F405
