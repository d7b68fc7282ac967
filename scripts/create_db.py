"""
Create the resume database (PostgreSQL) and its tables.

Usage (from the repository root):
    python scripts/create_db.py
"""
import asyncio
import os
import sys

from loguru import logger
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine

# Add backend/src to path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "backend", "src"))

from core.config import settings
from core.database import init_db, close_db


async def create_database():
    db_url = settings.DATABASE_URL
    if not db_url.startswith("postgresql"):
        logger.info("Skipping CREATE DATABASE for non-PostgreSQL URL")
        return

    # Connect to the default postgres DB to create the target DB
    base_url = db_url.rsplit('/', 1)[0] + '/postgres'
    target_db = db_url.rsplit('/', 1)[1]

    logger.info(f"Connecting to {base_url} to create {target_db}...")
    engine = create_async_engine(base_url, isolation_level="AUTOCOMMIT")

    try:
        async with engine.connect() as conn:
            result = await conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :name"),
                {"name": target_db},
            )
            if result.scalar():
                logger.info(f"Database {target_db} already exists.")
            else:
                await conn.execute(text(f'CREATE DATABASE "{target_db}"'))
                logger.info(f"Database {target_db} created successfully!")
    finally:
        await engine.dispose()


async def main():
    await create_database()
    await init_db()
    logger.info("✅ Tables resume_requests, resume_versions, processed_resumes are ready")
    await close_db()


if __name__ == "__main__":
    asyncio.run(main())
