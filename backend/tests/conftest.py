"""Root conftest — shared test configuration."""

import os

# Ensure tests never pick up a developer's .env storage settings
os.environ.setdefault("STORAGE_BACKEND", "file")
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("LOG_FORMAT", "text")
