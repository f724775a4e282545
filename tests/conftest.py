"""Test-wide environment: cheap bcrypt and a fixed JWT secret before settings load."""

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("APP_TIMEZONE", "Asia/Jakarta")
os.environ.setdefault("PUSH_ENABLED", "false")
