"""Root pytest configuration.

Pins the environment before ``tablemate`` is imported so the settings
object never picks up a developer's ``.env`` API key or database.
"""

import os

os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["OPENAI_API_KEY"] = ""
os.environ["SENTRY_DSN"] = ""
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
