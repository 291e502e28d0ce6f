"""Initialize database schema for mentor search.

Creates all tables the search service reads from.
Run this before starting the API server.
"""

import argparse
import asyncio
import sys
import traceback

from mentorsearch.config import settings
from mentorsearch.db import engine
from mentorsearch.models import Base


async def init_database(drop: bool = False):
    """Create all database tables, optionally dropping them first."""
    print(f"Initializing database: {settings.db.url}")

    async with engine.begin() as conn:
        if drop:
            await conn.run_sync(Base.metadata.drop_all)
            print("✓ Dropped existing tables")

        await conn.run_sync(Base.metadata.create_all)
        print("✓ Created all tables")

    await engine.dispose()

    print("\n✅ Database initialization complete!")
    print(f"Tables: {', '.join(Base.metadata.tables.keys())}")


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--drop", action="store_true", help="Drop existing tables first")
    args = parser.parse_args()

    try:
        await init_database(drop=args.drop)
    except Exception as e:
        print(f"\n❌ Error initializing database: {e}")
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
