"""Top-level application package for the Tablemate back-office API.

Tablemate serves the day-to-day back office of a restaurant: customers
upload receipt photos which are scored for trustworthiness, reviews
receive suggested replies, and staff manage table reservations and
reusable response templates. The package contains the database models,
Pydantic schemas, the scoring and analysis services and the API
routers.

To run the API locally you can execute:

```bash
uvicorn tablemate.api.main:app --reload
```

This will serve the FastAPI application on http://localhost:8000. The
default configuration uses a local SQLite database stored in
``tablemate.db``. You can override configuration values using
environment variables or a ``.env`` file at the project root.
"""

__all__: list[str] = []
