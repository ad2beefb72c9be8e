import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SUBSCRIPTION_WATCH_ENABLED", "false")
os.environ.setdefault("API_KEYS", "test-key:tester")
