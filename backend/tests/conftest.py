"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or identity provider
os.environ.setdefault("SUPABASE_URL", "http://identity.test")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-test-key")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
