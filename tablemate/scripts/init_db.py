"""Initialize database tables.

Usage:
  python -m tablemate.scripts.init_db [--seed]
"""

from __future__ import annotations

import argparse
import asyncio

from tablemate.core.database import AsyncSessionLocal, init_db
from tablemate.services.repository import SqlStorage
from tablemate.services.seed import seed_demo_data


async def main(seed: bool = False) -> int:
    print("Initializing database tables...")
    await init_db()
    if seed:
        async with AsyncSessionLocal() as session:
            storage = SqlStorage(session)
            if await storage.is_empty():
                await seed_demo_data(storage)
                print("[ok] demo data seeded")
            else:
                print("[skip] database already has data; not seeding")
    print("Database initialization complete!")
    return 0


if __name__ == "__main__":  # pragma: no cover
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seed", action="store_true", help="insert demo data into an empty database")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(main(seed=args.seed)))
