import os

# Default settings for tests; individual tests override through monkeypatch.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_orderflow.db")
os.environ.setdefault("LOG_SAMPLE_2XX", "1")
os.environ.pop("REDIS_URL", None)
os.environ.pop("ERROR_DSN", None)
