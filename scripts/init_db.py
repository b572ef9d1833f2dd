"""
Database Initialization Script

Creates the users and messages tables (and the verified-username index)
without starting the web server. Useful before the first deploy, or to
bootstrap a fresh database from CI.

Usage:
    python scripts/init_db.py

Note: create_all() only adds missing tables. For changes to existing
tables, use a migration tool like Alembic.
"""

import asyncio
import os
import sys

# Add parent directory to Python path so we can import whisperbox modules
# This allows running the script from any directory
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from whisperbox.database import dispose_engine, get_engine
from whisperbox.models import Base


async def init_db():
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("Tables created:", ", ".join(Base.metadata.tables))
    await dispose_engine()


if __name__ == "__main__":
    asyncio.run(init_db())
